# orders/serializers/checkout.py

"""
CHECKOUT INPUT SERIALIZERS

Accepted body for POST /api/orders/:

    {
      "items": [{"product_id", "quantity", "size"?, "color"?}],   optional
      "shipping_address": {"line1", "city", "postal_code"?, "country"?, ...},
      "billing_address": {...},                                     optional
      "customer_info": {"first_name", "last_name"?, "email", "phone"?},
      "notes": "..."                                                optional
    }

Omitting "items" checks out the caller's cart. Any "total_amount" the
client sends is ignored.
"""

from rest_framework import serializers

from orders.models import Order


class AddressSerializer(serializers.Serializer):
    line1 = serializers.CharField(max_length=255)
    line2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=120)
    state = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(
        max_length=20, required=False, allow_blank=True, default=""
    )
    country = serializers.CharField(max_length=80, required=False, allow_blank=True, default="Kenya")


class CustomerInfoSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=120)
    last_name = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")


class CheckoutLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    size = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    color = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")


class CreateOrderSerializer(serializers.Serializer):
    items = CheckoutLineSerializer(many=True, required=False)
    shipping_address = AddressSerializer()
    billing_address = AddressSerializer(required=False)
    customer_info = CustomerInfoSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Order.STATUS_CHOICES])
