# products/admin_urls.py

"""
ADMIN CATALOG URLS

Mounted at /api/admin/:
- /api/admin/products/      (includes unpublished)
- /api/admin/categories/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import AdminCategoryViewSet, AdminProductViewSet

router = SimpleRouter()

router.register(r"products", AdminProductViewSet, basename="admin-products")
router.register(r"categories", AdminCategoryViewSet, basename="admin-categories")

urlpatterns = [
    path("", include(router.urls)),
]
