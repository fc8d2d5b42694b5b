# orders/services/checkout.py

"""
CHECKOUT

place_order() turns the customer's cart (or an explicit list of lines) into a
PENDING order.

Rules:
- Prices and product names are snapshotted from the catalog, never taken
  from the client.
- Stock is checked against inventory_quantity but NOT decremented; that
  happens in lifecycle.mark_paid() once money has arrived.
- When the order is built from the cart, the cart is emptied.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from django.conf import settings
from django.db import transaction

from cart.models import CartItem
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    ProductUnavailableError,
)
from orders.services.pricing import _money, compute_totals
from products.models import Product

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")


def _lines_from_cart(user) -> list[dict]:
    return [
        {
            "product_id": item.product_id,
            "quantity": int(item.quantity),
            "size": item.size,
            "color": item.color,
        }
        for item in CartItem.objects.filter(user=user).order_by("created_at")
    ]


def _resolve_lines(lines: list[dict]) -> list[tuple[Product, dict]]:
    product_ids = {line["product_id"] for line in lines}
    products = {
        p.id: p
        for p in Product.objects.filter(id__in=product_ids, is_published=True)
    }

    resolved = []
    requested = defaultdict(int)
    for line in lines:
        product = products.get(line["product_id"])
        if product is None:
            raise ProductUnavailableError(f"Product not found: {line['product_id']}")
        requested[product.id] += int(line["quantity"])
        resolved.append((product, line))

    for product_id, qty in requested.items():
        product = products[product_id]
        available = int(product.inventory_quantity or 0)
        if available < qty:
            raise InsufficientStockError(product=product, requested=qty, available=available)

    return resolved


def _address_kwargs(kind: str, address: dict | None) -> dict:
    address = address or {}
    return {
        f"{kind}_{field}": str(address.get(field) or "").strip()
        for field in ADDRESS_FIELDS
    }


@transaction.atomic
def place_order(
    *,
    user,
    lines: list[dict] | None = None,
    shipping_address: dict | None = None,
    billing_address: dict | None = None,
    customer: dict | None = None,
    notes: str = "",
) -> Order:
    from_cart = lines is None
    if from_cart:
        lines = _lines_from_cart(user)

    if not lines:
        raise EmptyCartError("Cart is empty" if from_cart else "No items to order")

    resolved = _resolve_lines(lines)
    totals = compute_totals((product.price, line["quantity"]) for product, line in resolved)

    customer = customer or {}
    order = Order.objects.create(
        user=user,
        status=Order.STATUS_PENDING,
        currency=settings.SHOP["CURRENCY"],
        customer_first_name=str(customer.get("first_name") or "").strip(),
        customer_last_name=str(customer.get("last_name") or "").strip(),
        customer_email=str(customer.get("email") or user.email or "").strip(),
        customer_phone=str(customer.get("phone") or "").strip(),
        notes=str(notes or "").strip(),
        **_address_kwargs("shipping", shipping_address),
        **_address_kwargs("billing", billing_address or shipping_address),
        **totals,
    )

    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                product=product,
                product_name=product.name,
                quantity=int(line["quantity"]),
                price=_money(product.price),
                size=str(line.get("size") or ""),
                color=str(line.get("color") or ""),
                line_total=_money(_money(product.price) * Decimal(int(line["quantity"]))),
            )
            for product, line in resolved
        ]
    )

    if from_cart:
        CartItem.objects.filter(user=user).delete()

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "user_id": str(user.id),
            "total_amount": str(order.total_amount),
            "source": "cart" if from_cart else "items",
        },
    )
    return order
