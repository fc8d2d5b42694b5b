# cart/admin.py

from django.contrib import admin

from cart.models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("user", "product", "quantity", "size", "color", "updated_at")
    search_fields = ("user__email", "product__name")
    list_select_related = ("user", "product")
    readonly_fields = ("created_at", "updated_at")
