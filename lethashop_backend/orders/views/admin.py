# orders/views/admin.py

"""
ADMIN ORDER VIEWS (orders.manage)

- GET       /api/admin/orders/?status=&q=
- GET       /api/admin/orders/<id>/
- PUT|PATCH /api/admin/orders/<id>/status/   {"status": "..."}

Status moves go through orders.services.lifecycle so inventory stays
consistent (paid decrements, cancelling a paid order restocks).
"""

from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.responses import error_response
from orders.models import Order
from orders.serializers import OrderSerializer, OrderStatusUpdateSerializer
from orders.services import InvalidStatusTransition, transition_order
from permissions.roles import CAP_ORDERS_MANAGE, HasCapability


class AdminOrderViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE
    filterset_fields = ["status"]

    def get_queryset(self):
        qs = (
            Order.objects.select_related("user")
            .prefetch_related("items__product")
            .order_by("-created_at")
        )
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(order_number__icontains=q)
                | Q(customer_email__icontains=q)
                | Q(user__email__icontains=q)
            )
        return qs

    @extend_schema(
        tags=["Admin"],
        parameters=[
            OpenApiParameter("status", str, description="Filter by order status"),
            OpenApiParameter("q", str, description="Order number or email contains"),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=["Admin"])
    def retrieve(self, request, *args, **kwargs):
        return super().retrieve(request, *args, **kwargs)

    @extend_schema(
        tags=["Admin"],
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Transition not allowed"),
        },
    )
    @action(detail=True, methods=["put", "patch"], url_path="status")
    def set_status(self, request, pk=None):
        order = self.get_object()

        s = OrderStatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            transition_order(order, s.validated_data["status"], actor=request.user)
        except InvalidStatusTransition as exc:
            return error_response(
                code="INVALID_STATUS_TRANSITION",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data)
