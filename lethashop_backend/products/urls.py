# products/urls.py

"""
CATALOG URLS (storefront)

Mounted at /api/ in backend/urls.py:
- /api/categories/            GET
- /api/categories/<slug>/     GET
- /api/products/              GET ?category=&featured=&q=
- /api/products/<slug>/       GET
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import CategoryViewSet, ProductViewSet

router = SimpleRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
