from .cart import CartItemView, CartView

__all__ = ["CartItemView", "CartView"]
