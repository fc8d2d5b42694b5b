# payments/admin.py

from django.contrib import admin

from payments.models import PaymentRequest


@admin.register(PaymentRequest)
class PaymentRequestAdmin(admin.ModelAdmin):
    list_display = (
        "checkout_request_id",
        "order",
        "phone_number",
        "amount",
        "status",
        "mpesa_receipt_number",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("checkout_request_id", "mpesa_receipt_number", "order__order_number", "phone_number")
    list_select_related = ("order",)
    readonly_fields = [f.name for f in PaymentRequest._meta.fields]
