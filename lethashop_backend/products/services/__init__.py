from .slugs import slugify_name, unique_slug

__all__ = [
    "slugify_name",
    "unique_slug",
]
