# products/filters.py

"""
CATALOG FILTERS (django-filter)

Storefront query params:
- ?category=<slug>     products in that category
- ?featured=true       featured products only (any other value is ignored)
- ?q=<text>            name / description / materials contains
- ?min_price= / ?max_price=
"""

import django_filters
from django.db.models import Q

from products.models import Product


class ProductFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category__slug")
    featured = django_filters.CharFilter(method="filter_featured")
    q = django_filters.CharFilter(method="filter_search")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["category", "featured", "q", "min_price", "max_price"]

    def filter_featured(self, queryset, name, value):
        if str(value).strip().lower() == "true":
            return queryset.filter(is_featured=True)
        return queryset

    def filter_search(self, queryset, name, value):
        q = (value or "").strip()
        if not q:
            return queryset
        return queryset.filter(
            Q(name__icontains=q) | Q(description__icontains=q) | Q(materials__icontains=q)
        )


class AdminProductFilter(ProductFilter):
    is_published = django_filters.BooleanFilter(field_name="is_published")

    class Meta(ProductFilter.Meta):
        fields = ProductFilter.Meta.fields + ["is_published"]
