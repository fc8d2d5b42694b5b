# orders/tests/test_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from orders.services import compute_totals

SHOP = {
    "CURRENCY": "KES",
    "FREE_SHIPPING_THRESHOLD": "150.00",
    "FLAT_SHIPPING_FEE": "15.00",
    "ADMIN_EMAIL_DOMAINS": ["lethashop.com"],
}


@override_settings(SHOP=SHOP)
class ComputeTotalsTests(SimpleTestCase):
    """
    GUARANTEES:
    - subtotal is sum(price * quantity) at 2dp
    - shipping is free strictly ABOVE the threshold, flat fee otherwise
    """

    def test_below_threshold_pays_flat_fee(self):
        totals = compute_totals([(Decimal("49.99"), 2)])
        self.assertEqual(totals["subtotal_amount"], Decimal("99.98"))
        self.assertEqual(totals["shipping_amount"], Decimal("15.00"))
        self.assertEqual(totals["total_amount"], Decimal("114.98"))

    def test_exactly_threshold_still_pays_shipping(self):
        totals = compute_totals([(Decimal("75.00"), 2)])
        self.assertEqual(totals["shipping_amount"], Decimal("15.00"))
        self.assertEqual(totals["total_amount"], Decimal("165.00"))

    def test_above_threshold_ships_free(self):
        totals = compute_totals([(Decimal("299.99"), 1), (Decimal("49.99"), 1)])
        self.assertEqual(totals["subtotal_amount"], Decimal("349.98"))
        self.assertEqual(totals["shipping_amount"], Decimal("0.00"))
        self.assertEqual(totals["total_amount"], Decimal("349.98"))
