# cart/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return the storefront cart in the shape the SPA renders directly.
- Totals are server-derived; money goes out as strings.
"""

from rest_framework import serializers

from cart.models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_slug = serializers.CharField(source="product.slug", read_only=True)
    image_url = serializers.CharField(source="product.image_url", read_only=True)
    inventory_quantity = serializers.IntegerField(
        source="product.inventory_quantity", read_only=True
    )

    price = serializers.DecimalField(
        source="unit_price", max_digits=10, decimal_places=2, read_only=True
    )
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_slug",
            "image_url",
            "inventory_quantity",
            "price",
            "quantity",
            "size",
            "color",
            "line_total",
            "created_at",
        ]
        read_only_fields = fields


class CartSerializer(serializers.Serializer):
    """
    Wraps the dict produced by cart.services.summarize_cart().
    """

    items = CartItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


# =====================================================
# INPUT SERIALIZERS
# =====================================================

class AddCartItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    size = serializers.CharField(required=False, allow_blank=True, max_length=32)
    color = serializers.CharField(required=False, allow_blank=True, max_length=32)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
