# cart/urls.py

from django.urls import path

from cart.views import CartItemView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("add/", CartView.as_view(), name="cart-add"),
    path("<uuid:product_id>/", CartItemView.as_view(), name="cart-item"),
]
