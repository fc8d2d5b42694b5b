# orders/views/order.py

"""
CUSTOMER ORDER VIEWS

Routes (mounted at /api/orders/):
- POST /                create a PENDING order from the cart or explicit items
- GET  /                own orders, newest first
- GET  /<id>/           own order (admins may read any)
- GET  /<id>/status/    lightweight poll used while waiting for M-Pesa

Key rule alignment:
- Totals are computed server-side; a client total is ignored.
- Polling is also where a payment that outlived the timeout window is
  expired, so an abandoned STK prompt cannot keep an order pending forever.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle

from backend.responses import error_response
from orders.models import Order
from orders.serializers import CreateOrderSerializer, OrderSerializer, OrderStatusSerializer
from orders.services import (
    EmptyCartError,
    InsufficientStockError,
    ProductUnavailableError,
    place_order,
)
from payments.services import expire_stale_requests, latest_payment_for
from permissions.roles import CAP_ORDERS_MANAGE, user_has_capability


class OrderPollThrottle(UserRateThrottle):
    """
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['payment_poll'].
    """

    scope = "payment_poll"


@extend_schema_view(
    list=extend_schema(tags=["Orders"]),
    retrieve=extend_schema(tags=["Orders"]),
)
class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Order.objects.select_related("user").prefetch_related("items__product")
        if self.action != "list" and user_has_capability(self.request.user, CAP_ORDERS_MANAGE):
            return qs.order_by("-created_at")
        return qs.filter(user=self.request.user).order_by("-created_at")

    def get_throttles(self):
        if self.action == "poll_status":
            return [OrderPollThrottle()]
        return super().get_throttles()

    @extend_schema(
        tags=["Orders"],
        request=CreateOrderSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Validation error / empty cart"),
            404: OpenApiResponse(description="Product not found"),
            409: OpenApiResponse(description="Insufficient stock"),
        },
    )
    def create(self, request, *args, **kwargs):
        s = CreateOrderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = place_order(
                user=request.user,
                lines=data.get("items"),
                shipping_address=data["shipping_address"],
                billing_address=data.get("billing_address"),
                customer=data.get("customer_info"),
                notes=data.get("notes") or "",
            )
        except EmptyCartError as exc:
            return error_response(
                code="EMPTY_CART",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except ProductUnavailableError as exc:
            return error_response(
                code="PRODUCT_NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )
        except InsufficientStockError as exc:
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Orders"], responses={200: OrderStatusSerializer})
    @action(detail=True, methods=["get"], url_path="status")
    def poll_status(self, request, pk=None):
        order = self.get_object()

        expire_stale_requests(order=order)
        order.refresh_from_db()

        payment = latest_payment_for(order)
        payload = {
            "order_id": order.id,
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": payment.status if payment else None,
            "total_amount": order.total_amount,
            "paid_at": order.paid_at,
        }
        return Response(OrderStatusSerializer(payload).data)
