# orders/services/pricing.py

"""
ORDER PRICING

Single source of truth for order money:
- subtotal = sum(price * quantity), 2dp half-up
- shipping = 0 when subtotal is ABOVE the free-shipping threshold,
  otherwise the flat fee (settings.SHOP)
- total = subtotal + shipping
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

from django.conf import settings

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def shipping_for(subtotal: Decimal) -> Decimal:
    shop = settings.SHOP
    threshold = _money(shop["FREE_SHIPPING_THRESHOLD"])
    if subtotal > threshold:
        return Decimal("0.00")
    return _money(shop["FLAT_SHIPPING_FEE"])


def compute_totals(lines: Iterable[Tuple[Decimal, int]]) -> dict:
    """
    lines: (unit_price, quantity) pairs.
    """
    subtotal = Decimal("0.00")
    for price, quantity in lines:
        subtotal += _money(price) * int(quantity)
    subtotal = _money(subtotal)

    shipping = shipping_for(subtotal)
    return {
        "subtotal_amount": subtotal,
        "shipping_amount": shipping,
        "total_amount": _money(subtotal + shipping),
    }
