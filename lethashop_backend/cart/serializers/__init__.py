from .cart import (
    AddCartItemSerializer,
    CartItemSerializer,
    CartSerializer,
    UpdateCartItemSerializer,
)

__all__ = [
    "AddCartItemSerializer",
    "CartItemSerializer",
    "CartSerializer",
    "UpdateCartItemSerializer",
]
