# products/services/slugs.py

"""
SLUG GENERATION

Rules:
- lowercase
- drop anything outside [a-z0-9 -]
- space runs become "-"
- dash runs collapse to a single "-"
- leading/trailing dashes trimmed

unique_slug() appends -2, -3, ... until the slug is free in the table.
"""

from __future__ import annotations

import re

_INVALID = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify_name(name: str) -> str:
    slug = (name or "").lower()
    slug = _INVALID.sub("", slug)
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _DASHES.sub("-", slug)
    return slug.strip("-")


def unique_slug(model, name: str, *, instance=None, max_length: int | None = None) -> str:
    if max_length is None:
        max_length = model._meta.get_field("slug").max_length

    base = slugify_name(name) or "item"
    base = base[:max_length].rstrip("-")

    qs = model.objects.all()
    if instance is not None and getattr(instance, "pk", None):
        qs = qs.exclude(pk=instance.pk)

    candidate = base
    n = 1
    while qs.filter(slug=candidate).exists():
        n += 1
        suffix = f"-{n}"
        candidate = f"{base[: max_length - len(suffix)].rstrip('-')}{suffix}"
    return candidate
