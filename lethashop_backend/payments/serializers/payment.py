# payments/serializers/payment.py

from rest_framework import serializers

from payments.models import PaymentRequest


class StkPushRequestSerializer(serializers.Serializer):
    """
    Body of POST /api/payments/mpesa/stkpush/.

    The amount is always derived from the order; "amount",
    "account_reference" and "transaction_desc" sent by older clients are
    ignored.
    """

    order_id = serializers.UUIDField()
    phone_number = serializers.CharField(max_length=20)


class StkPushResponseSerializer(serializers.Serializer):
    payment_request_id = serializers.UUIDField()
    order_id = serializers.UUIDField()
    amount = serializers.IntegerField()
    MerchantRequestID = serializers.CharField()
    CheckoutRequestID = serializers.CharField()
    ResponseCode = serializers.CharField()
    ResponseDescription = serializers.CharField()
    CustomerMessage = serializers.CharField()


class PaymentRequestSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(source="order.id", read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = PaymentRequest
        fields = [
            "id",
            "order_id",
            "order_number",
            "order_status",
            "phone_number",
            "amount",
            "checkout_request_id",
            "merchant_request_id",
            "status",
            "result_code",
            "result_desc",
            "mpesa_receipt_number",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
