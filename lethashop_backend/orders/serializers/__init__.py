from .checkout import (
    AddressSerializer,
    CheckoutLineSerializer,
    CreateOrderSerializer,
    CustomerInfoSerializer,
    OrderStatusUpdateSerializer,
)
from .order import OrderItemSerializer, OrderSerializer, OrderStatusSerializer

__all__ = [
    "AddressSerializer",
    "CheckoutLineSerializer",
    "CreateOrderSerializer",
    "CustomerInfoSerializer",
    "OrderStatusUpdateSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderStatusSerializer",
]
