# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/

Storefront (AllowAny):
- /api/categories/, /api/products/

Customer (authenticated):
- /api/auth/..., /api/users/me/, /api/cart/, /api/orders/, /api/payments/

Admin (capability-gated):
- /api/admin/products/, /api/admin/categories/, /api/admin/orders/,
  /api/admin/users/

Safaricom:
- /api/payments/mpesa/callback/ (token in query string)

Security hardening:
- Django admin path is configurable via env var (ADMIN_PATH).
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import DatabaseError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from users.views import MeView


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "message": {"type": "string"},
                "auth": {"type": "object"},
                "docs": {"type": "object"},
                "modules": {"type": "object"},
            },
        }
    },
)
@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "LethaShop API is running",
            "auth": {
                "signup": "/api/auth/signup/",
                "signin": "/api/auth/signin/",
                "signout": "/api/auth/signout/",
                "token_refresh": "/api/auth/token/refresh/",
                "oauth_google": "/api/auth/oauth/google/redirect_url/",
                "sessions": "/api/auth/sessions/",
                "me": "/api/users/me/",
            },
            "docs": {
                "swagger": "/api/docs/",
                "schema": "/api/schema/",
            },
            "modules": {
                "categories": "/api/categories/",
                "products": "/api/products/",
                "cart": "/api/cart/",
                "orders": "/api/orders/",
                "payments": "/api/payments/mpesa/stkpush/",
                "admin": "/api/admin/",
            },
        }
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
            },
        },
        503: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "error": {"type": "string"},
            },
        },
    },
)
@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """
    Minimal operational endpoint:
    - Confirms app is responding
    - Confirms DB connection + simple query works
    """
    try:
        conn = connections["default"]
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
        return Response({"status": "ok", "db": "ok"})
    except DatabaseError as e:
        return Response({"status": "degraded", "db": "down", "error": str(e)}, status=503)


# ------------------ ADMIN PATH (HARDENED) ------------------
# Keep the trailing slash. In production pick something non-obvious, e.g.
#   ADMIN_PATH=back-office-7q2m/
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ ADMIN API ------------------
admin_api_urlpatterns = [
    path("", include("products.admin_urls")),
    path("", include("orders.admin_urls")),
    path("", include("users.admin_urls")),
]


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    # Health check / root
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth & Users
    path("auth/", include("users.urls")),
    path("users/me/", MeView.as_view(), name="users-me"),
    # Storefront
    path("", include("products.urls")),
    path("cart/", include("cart.urls")),
    path("orders/", include("orders.urls")),
    path("payments/", include("payments.urls")),
    # Admin panel API
    path("admin/", include(admin_api_urlpatterns)),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    # Root convenience: visiting / takes you to Swagger docs
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
