# orders/admin_urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from orders.views import AdminOrderViewSet

router = SimpleRouter()
router.register(r"orders", AdminOrderViewSet, basename="admin-orders")

urlpatterns = [
    path("", include(router.urls)),
]
