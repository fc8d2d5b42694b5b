# products/views/admin.py

"""
ADMIN CATALOG VIEWSETS

Purpose:
- Full CRUD for products + categories (catalog.edit capability).
- Admin product list includes unpublished products.

Delete rule:
- Products referenced by an order item are PROTECTED (order history must
  keep pointing at real rows). Unpublish them instead; the API answers 409.
"""

from __future__ import annotations

import logging

from django.db.models import ProtectedError
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.responses import error_response
from permissions.roles import CAP_CATALOG_EDIT, HasCapability
from products.filters import AdminProductFilter
from products.models import Category, Product
from products.serializers import CategorySerializer, ProductSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"]),
    update=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"]),
    destroy=extend_schema(
        tags=["Admin"],
        responses={204: None, 409: OpenApiResponse(description="Product has orders")},
    ),
)
class AdminProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CATALOG_EDIT
    filterset_class = AdminProductFilter

    def get_queryset(self):
        return Product.objects.select_related("category").order_by("-created_at")

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(
            "Product created",
            extra={"product_id": str(product.id), "by": str(self.request.user.id)},
        )

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        try:
            product.delete()
        except ProtectedError:
            return error_response(
                code="PRODUCT_IN_USE",
                message="Product has orders and cannot be deleted. Unpublish it instead.",
                http_status=status.HTTP_409_CONFLICT,
            )
        logger.info(
            "Product deleted",
            extra={"product_id": str(kwargs.get("pk")), "by": str(request.user.id)},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Admin"])
class AdminCategoryViewSet(viewsets.ModelViewSet):
    """
    Categories are small; the list is unpaginated like the storefront one.
    Deleting a category leaves its products uncategorised.
    """

    queryset = Category.objects.all().order_by("sort_order", "name")
    serializer_class = CategorySerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CATALOG_EDIT
    pagination_class = None
