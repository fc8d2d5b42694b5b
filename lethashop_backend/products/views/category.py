# products/views/category.py

from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from products.models import Category
from products.serializers.category import CategorySerializer
from products.views.product import CatalogThrottle


@extend_schema(tags=["Catalog"])
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Storefront categories.

    Policy:
    - Anyone can read (menus + filters need this before sign-in)
    - Unpaginated: the full list is small and drives navigation
    - Ordered by sort_order, then name
    """

    queryset = Category.objects.all().order_by("sort_order", "name")
    serializer_class = CategorySerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [CatalogThrottle]
    pagination_class = None
    lookup_field = "slug"
    lookup_value_regex = "[a-z0-9-]+"
