# cart/services/cart.py

"""
CART SERVICE

Single place that mutates a customer's cart, shared by the cart API and by
checkout (which empties the cart once an order is placed).

Upsert rule:
- Adding a product already in the cart increments its quantity; size/color
  are overwritten only when the caller supplies them.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from cart.models import CartItem
from cart.services.exceptions import ProductUnavailableError
from products.models import Product

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def cart_items_for(user):
    return (
        CartItem.objects.select_related("product")
        .filter(user=user)
        .order_by("created_at")
    )


def summarize_cart(user) -> dict:
    items = list(cart_items_for(user))
    subtotal = sum((i.line_total for i in items), Decimal("0.00"))
    return {
        "items": items,
        "item_count": sum(int(i.quantity) for i in items),
        "subtotal": subtotal.quantize(TWOPLACES),
    }


def _published_product(product_id) -> Product:
    product = Product.objects.filter(id=product_id, is_published=True).first()
    if product is None:
        raise ProductUnavailableError("Product not found")
    return product


@transaction.atomic
def add_item(*, user, product_id, quantity: int = 1, size=None, color=None) -> CartItem:
    product = _published_product(product_id)

    defaults = {"quantity": int(quantity)}
    if size is not None:
        defaults["size"] = size
    if color is not None:
        defaults["color"] = color

    item, created = CartItem.objects.select_for_update().get_or_create(
        user=user,
        product=product,
        defaults=defaults,
    )

    if not created:
        # Row is locked by select_for_update()
        item.quantity = int(item.quantity) + int(quantity)
        update_fields = ["quantity", "updated_at"]
        if size is not None:
            item.size = size
            update_fields.append("size")
        if color is not None:
            item.color = color
            update_fields.append("color")
        item.save(update_fields=update_fields)

    logger.info(
        "Cart item added",
        extra={
            "user_id": str(user.id),
            "product_id": str(product.id),
            "quantity": item.quantity,
        },
    )
    return item


def set_quantity(*, user, product_id, quantity: int) -> CartItem | None:
    item = CartItem.objects.filter(user=user, product_id=product_id).first()
    if item is None:
        return None
    item.quantity = int(quantity)
    item.save(update_fields=["quantity", "updated_at"])
    return item


def remove_item(*, user, product_id) -> bool:
    deleted, _ = CartItem.objects.filter(user=user, product_id=product_id).delete()
    return deleted > 0


def clear_cart(user) -> int:
    deleted, _ = CartItem.objects.filter(user=user).delete()
    return deleted
