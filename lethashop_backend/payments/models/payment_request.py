# payments/models/payment_request.py

import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class PaymentRequest(models.Model):
    """
    One M-Pesa STK Push sent for an order.

    Idempotency rule:
    - checkout_request_id is unique (Safaricom CheckoutRequestID)
    - callback processing is keyed on it and settles a request at most once

    Timeout rule:
    - a request still PENDING after MPESA["PAYMENT_TIMEOUT_SECONDS"] is
      EXPIRED (the customer ignored or dismissed the prompt).
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"
    STATUS_EXPIRED = "expired"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
        (STATUS_EXPIRED, "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payment_requests",
    )

    phone_number = models.CharField(max_length=20)

    # Whole shillings; STK Push does not accept cents
    amount = models.PositiveIntegerField()

    account_reference = models.CharField(max_length=64, blank=True, default="")
    transaction_desc = models.CharField(max_length=255, blank=True, default="")

    merchant_request_id = models.CharField(max_length=128, blank=True, default="")
    checkout_request_id = models.CharField(
        max_length=128,
        unique=True,
        help_text="Safaricom CheckoutRequestID. Must be unique for idempotency.",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    result_code = models.IntegerField(null=True, blank=True)
    result_desc = models.CharField(max_length=255, blank=True, default="")
    mpesa_receipt_number = models.CharField(max_length=64, blank=True, default="")

    raw_response = models.JSONField(default=dict, blank=True)
    raw_callback = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "payment_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="payment_req_status_7d1e2f_idx"),
            models.Index(fields=["order", "created_at"], name="payment_req_order_i_5a9c4b_idx"),
        ]

    @staticmethod
    def timeout() -> timedelta:
        return timedelta(seconds=int(settings.MPESA["PAYMENT_TIMEOUT_SECONDS"]))

    def is_stale(self, now=None) -> bool:
        now = now or timezone.now()
        return self.status == self.STATUS_PENDING and self.created_at <= now - self.timeout()

    def __str__(self):
        return f"{self.checkout_request_id} | {self.amount} | {self.status}"
