# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for both the storefront and admin endpoints.
- category is written as an id and read back with its name + slug
  (the storefront renders category_name without a second request).
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Category, Product
from products.services.slugs import slugify_name


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - price > 0, compare_at_price > 0 when present
    - gallery_images is always a list of URLs
    - SKU normalised to upper case; blank SKU stored as NULL
    """

    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    category_slug = serializers.CharField(source="category.slug", read_only=True, default=None)

    slug = serializers.CharField(required=False, allow_blank=True, max_length=280)
    sku = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=128)
    gallery_images = serializers.ListField(
        child=serializers.URLField(max_length=500), required=False
    )
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "compare_at_price",
            "sku",
            "inventory_quantity",
            "in_stock",
            "image_url",
            "gallery_images",
            "materials",
            "care_instructions",
            "category",
            "category_name",
            "category_slug",
            "is_published",
            "is_featured",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "category_name",
            "category_slug",
            "in_stock",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_slug(self, value):
        slug = slugify_name(value)
        if not slug:
            return ""
        qs = Product.objects.filter(slug=slug)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A product with this slug already exists")
        return slug

    def validate_sku(self, value):
        value = (value or "").strip().upper()
        if not value:
            return None
        qs = Product.objects.filter(sku=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A product with this SKU already exists")
        return value

    def validate_price(self, value):
        if value is None or value <= Decimal("0.00"):
            raise serializers.ValidationError("Price must be greater than zero")
        return value

    def validate_compare_at_price(self, value):
        if value is not None and value <= Decimal("0.00"):
            raise serializers.ValidationError("Compare-at price must be greater than zero")
        return value

