# products/views/__init__.py

"""
Products views package exports.

Purpose:
- Central export point for router imports (storefront + admin viewsets).
"""

from .admin import AdminCategoryViewSet, AdminProductViewSet
from .category import CategoryViewSet
from .product import CatalogThrottle, ProductViewSet

__all__ = [
    "CatalogThrottle",
    "CategoryViewSet",
    "ProductViewSet",
    "AdminCategoryViewSet",
    "AdminProductViewSet",
]
