# products/views/product.py

"""
STOREFRONT PRODUCT VIEWSET

Purpose:
- Public product browsing (AllowAny, read-only)
- GET /api/products/?category=<slug>&featured=true&q=<text>
- GET /api/products/<slug>/

Key rule alignment:
- Only published products are visible; everything else is a 404.
- Newest first.
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.throttling import AnonRateThrottle

from products.filters import ProductFilter
from products.models import Product
from products.serializers import ProductSerializer


class CatalogThrottle(AnonRateThrottle):
    """
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['catalog'].
    """

    scope = "catalog"


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [CatalogThrottle]
    filterset_class = ProductFilter
    lookup_field = "slug"
    lookup_value_regex = "[a-z0-9-]+"

    def get_queryset(self):
        return (
            Product.objects.select_related("category")
            .filter(is_published=True)
            .order_by("-created_at")
        )

    def get_object(self):
        slug = self.kwargs.get(self.lookup_field)
        product = self.get_queryset().filter(slug=slug).first()
        if product is None:
            raise NotFound("Product not found")
        self.check_object_permissions(self.request, product)
        return product

    @extend_schema(
        tags=["Catalog"],
        parameters=[
            OpenApiParameter("category", str, description="Category slug"),
            OpenApiParameter("featured", str, description="'true' for featured only"),
            OpenApiParameter("q", str, description="Search name / description / materials"),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=["Catalog"],
        responses={200: ProductSerializer, 404: OpenApiResponse(description="Product not found")},
    )
    def retrieve(self, request, *args, **kwargs):
        return super().retrieve(request, *args, **kwargs)
