from __future__ import annotations

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentRequest",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("phone_number", models.CharField(max_length=20)),
                ("amount", models.PositiveIntegerField()),
                ("account_reference", models.CharField(blank=True, default="", max_length=64)),
                ("transaction_desc", models.CharField(blank=True, default="", max_length=255)),
                ("merchant_request_id", models.CharField(blank=True, default="", max_length=128)),
                (
                    "checkout_request_id",
                    models.CharField(
                        help_text="Safaricom CheckoutRequestID. Must be unique for idempotency.",
                        max_length=128,
                        unique=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                            ("expired", "Expired"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("result_code", models.IntegerField(blank=True, null=True)),
                ("result_desc", models.CharField(blank=True, default="", max_length=255)),
                ("mpesa_receipt_number", models.CharField(blank=True, default="", max_length=64)),
                ("raw_response", models.JSONField(blank=True, default=dict)),
                ("raw_callback", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_requests",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "payment_requests",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"], name="payment_req_status_7d1e2f_idx"
                    ),
                    models.Index(
                        fields=["order", "created_at"], name="payment_req_order_i_5a9c4b_idx"
                    ),
                ],
            },
        ),
    ]
