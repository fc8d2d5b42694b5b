# products/serializers/category.py

from rest_framework import serializers

from products.models import Category
from products.services.slugs import slugify_name


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - name is required; slug is derived from it when omitted
    - a category cannot be its own parent
    """

    name = serializers.CharField(required=True, allow_blank=False, max_length=120)
    slug = serializers.CharField(required=False, allow_blank=True, max_length=140)
    parent = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "parent",
            "sort_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_slug(self, value: str):
        slug = slugify_name(value)
        if not slug:
            return ""
        qs = Category.objects.filter(slug=slug)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A category with this slug already exists")
        return slug

    def validate_parent(self, value):
        if value is not None and self.instance is not None and value.pk == self.instance.pk:
            raise serializers.ValidationError("A category cannot be its own parent")
        return value
