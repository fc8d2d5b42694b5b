# orders/serializers/order.py

"""
ORDER SERIALIZERS (read side)

Money goes out as strings; addresses are regrouped into nested objects so the
SPA gets back the same shape it posted.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_slug = serializers.CharField(source="product.slug", read_only=True)
    image_url = serializers.CharField(source="product.image_url", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_slug",
            "image_url",
            "quantity",
            "price",
            "size",
            "color",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    customer_info = serializers.SerializerMethodField()
    shipping_address = serializers.SerializerMethodField()
    billing_address = serializers.SerializerMethodField()
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "user_email",
            "subtotal_amount",
            "shipping_amount",
            "total_amount",
            "currency",
            "customer_info",
            "shipping_address",
            "billing_address",
            "notes",
            "items",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer_info(self, obj) -> dict:
        return {
            "first_name": obj.customer_first_name,
            "last_name": obj.customer_last_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
        }

    def get_shipping_address(self, obj) -> dict:
        return obj.address("shipping")

    def get_billing_address(self, obj) -> dict:
        return obj.address("billing")


class OrderStatusSerializer(serializers.Serializer):
    """
    Response shape of GET /api/orders/<id>/status/ (polled by checkout).
    """

    order_id = serializers.UUIDField()
    order_number = serializers.CharField()
    status = serializers.CharField()
    payment_status = serializers.CharField(allow_null=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_at = serializers.DateTimeField(allow_null=True)
