# orders/admin.py
"""
Order admin: read-mostly. Status changes should go through the API so the
inventory rules in orders.services.lifecycle apply.
"""

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "product_name", "quantity", "price", "size", "color", "line_total")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "user",
        "status",
        "total_amount",
        "currency",
        "created_at",
        "paid_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("order_number", "customer_email", "user__email")
    ordering = ("-created_at",)
    list_select_related = ("user",)
    readonly_fields = (
        "order_number",
        "status",
        "subtotal_amount",
        "shipping_amount",
        "total_amount",
        "created_at",
        "updated_at",
        "paid_at",
    )
    inlines = [OrderItemInline]
