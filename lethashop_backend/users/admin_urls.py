# users/admin_urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from users.views import AdminUserViewSet

router = SimpleRouter()
router.register(r"users", AdminUserViewSet, basename="admin-users")

urlpatterns = [
    path("", include(router.urls)),
]
