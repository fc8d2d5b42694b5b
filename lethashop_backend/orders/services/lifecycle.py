# orders/services/lifecycle.py

"""
ORDER LIFECYCLE

    pending    -> paid | failed | cancelled
    failed     -> pending            (customer retries payment)
    paid       -> processing | cancelled
    processing -> shipped | cancelled
    shipped    -> delivered

delivered and cancelled are terminal.

Inventory rules:
- mark_paid() decrements inventory_quantity (row-locked) and stamps paid_at.
- Cancelling a paid/processing order puts the stock back.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from orders.models import Order
from orders.services.exceptions import InvalidStatusTransition
from products.models import Product

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    Order.STATUS_PENDING: {Order.STATUS_PAID, Order.STATUS_FAILED, Order.STATUS_CANCELLED},
    Order.STATUS_FAILED: {Order.STATUS_PENDING},
    Order.STATUS_PAID: {Order.STATUS_PROCESSING, Order.STATUS_CANCELLED},
    Order.STATUS_PROCESSING: {Order.STATUS_SHIPPED, Order.STATUS_CANCELLED},
    Order.STATUS_SHIPPED: {Order.STATUS_DELIVERED},
    Order.STATUS_DELIVERED: set(),
    Order.STATUS_CANCELLED: set(),
}

# Statuses where inventory has already been taken for the order
STOCK_COMMITTED = {Order.STATUS_PAID, Order.STATUS_PROCESSING}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def _lock(order: Order) -> Order:
    return Order.objects.select_for_update().get(pk=order.pk)


def _adjust_inventory(order: Order, *, sign: int) -> None:
    items = list(order.items.all())
    # Lock product rows in a stable order so concurrent orders cannot deadlock
    product_ids = {i.product_id for i in items}
    list(Product.objects.select_for_update().filter(id__in=product_ids).order_by("id"))

    for item in items:
        if sign < 0:
            Product.objects.filter(id=item.product_id).update(
                inventory_quantity=Greatest(F("inventory_quantity") - item.quantity, 0)
            )
        else:
            Product.objects.filter(id=item.product_id).update(
                inventory_quantity=F("inventory_quantity") + item.quantity
            )


@transaction.atomic
def mark_paid(order: Order) -> Order:
    """
    Idempotent: an order that is already paid is returned unchanged.
    """
    order = _lock(order)
    if order.status == Order.STATUS_PAID:
        return order
    if not can_transition(order.status, Order.STATUS_PAID):
        raise InvalidStatusTransition(order.status, Order.STATUS_PAID)

    _adjust_inventory(order, sign=-1)

    order.status = Order.STATUS_PAID
    order.save(update_fields=["status", "paid_at", "updated_at"])

    logger.info(
        "Order paid",
        extra={"order_id": str(order.id), "order_number": order.order_number},
    )
    return order


@transaction.atomic
def mark_failed(order: Order, *, reason: str = "") -> Order:
    order = _lock(order)
    if order.status == Order.STATUS_FAILED:
        return order
    if not can_transition(order.status, Order.STATUS_FAILED):
        raise InvalidStatusTransition(order.status, Order.STATUS_FAILED)

    order.status = Order.STATUS_FAILED
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order payment failed",
        extra={"order_id": str(order.id), "order_number": order.order_number, "reason": reason},
    )
    return order


@transaction.atomic
def transition_order(order: Order, target: str, *, actor=None) -> Order:
    """
    Generic status move used by the admin endpoint.
    """
    if target == Order.STATUS_PAID:
        return mark_paid(order)
    if target == Order.STATUS_FAILED:
        return mark_failed(order, reason="manual")

    order = _lock(order)
    current = order.status
    if current == target:
        return order
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)

    if target == Order.STATUS_CANCELLED and current in STOCK_COMMITTED:
        _adjust_inventory(order, sign=+1)

    order.status = target
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status changed",
        extra={
            "order_id": str(order.id),
            "from": current,
            "to": target,
            "by": str(getattr(actor, "id", "") or ""),
        },
    )
    return order
