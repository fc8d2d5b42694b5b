# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class Order(models.Model):
    """
    Storefront order.

    Key rule:
    - An order is created PENDING with prices snapshotted from the catalog.
    - It becomes PAID only after the M-Pesa callback confirms the payment
      (or an admin marks it so); only then is inventory decremented.
    - Money fields are server authoritative; client totals are ignored.
    """

    STATUS_PENDING = "pending"
    STATUS_PAID = "paid"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PAID, "Paid"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    order_number = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated public order number (LSYYYYMMDD-XXXXXXXX)",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # Money fields (server authoritative)
    subtotal_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    shipping_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    currency = models.CharField(max_length=3, default="KES")

    # Customer contact (copied from checkout form)
    customer_first_name = models.CharField(max_length=120, blank=True, default="")
    customer_last_name = models.CharField(max_length=120, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    customer_phone = models.CharField(max_length=40, blank=True, default="")

    # Shipping address
    shipping_line1 = models.CharField(max_length=255, blank=True, default="")
    shipping_line2 = models.CharField(max_length=255, blank=True, default="")
    shipping_city = models.CharField(max_length=120, blank=True, default="")
    shipping_state = models.CharField(max_length=120, blank=True, default="")
    shipping_postal_code = models.CharField(max_length=20, blank=True, default="")
    shipping_country = models.CharField(max_length=80, blank=True, default="")

    # Billing address
    billing_line1 = models.CharField(max_length=255, blank=True, default="")
    billing_line2 = models.CharField(max_length=255, blank=True, default="")
    billing_city = models.CharField(max_length=120, blank=True, default="")
    billing_state = models.CharField(max_length=120, blank=True, default="")
    billing_postal_code = models.CharField(max_length=20, blank=True, default="")
    billing_country = models.CharField(max_length=80, blank=True, default="")

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_orde_status_4c2a1b_idx"),
            models.Index(fields=["user", "created_at"], name="orders_orde_user_id_9e7f3d_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.order_number:
            prefix = timezone.now().strftime("LS%Y%m%d")
            self.order_number = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        # If status flips to PAID and paid_at not set, stamp it
        if self.status == self.STATUS_PAID and not self.paid_at:
            self.paid_at = timezone.now()

        super().save(*args, **kwargs)

    def address(self, kind: str) -> dict:
        """
        kind is "shipping" or "billing".
        """
        return {
            field: getattr(self, f"{kind}_{field}")
            for field in ("line1", "line2", "city", "state", "postal_code", "country")
        }

    def __str__(self):
        return f"{self.order_number} | {self.total_amount} | {self.status}"
