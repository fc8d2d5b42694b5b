from .cart import add_item, cart_items_for, clear_cart, remove_item, set_quantity, summarize_cart
from .exceptions import CartError, ProductUnavailableError

__all__ = [
    "add_item",
    "cart_items_for",
    "clear_cart",
    "remove_item",
    "set_quantity",
    "summarize_cart",
    "CartError",
    "ProductUnavailableError",
]
