# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Catalog admin:
- Categories ordered the way the storefront menu shows them.
- Products searchable by name / slug / SKU; publish + feature toggles
  editable straight from the list.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Category, Product


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "parent", "sort_order")
    list_editable = ("sort_order",)
    search_fields = ("name", "slug")
    ordering = ("sort_order", "name")
    readonly_fields = ("created_at", "updated_at")


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "sku",
        "category",
        "price",
        "inventory_quantity",
        "is_published",
        "is_featured",
        "created_at",
    )
    list_editable = ("is_published", "is_featured")
    list_filter = ("is_published", "is_featured", "category", "created_at")
    search_fields = ("name", "slug", "sku")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
