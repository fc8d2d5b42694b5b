# users/urls.py

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    LogoutView,
    MeView,
    OAuthRedirectUrlView,
    ProfileView,
    SessionExchangeView,
    SignInView,
    SignOutView,
    SignUpView,
)

app_name = "users"

urlpatterns = [
    # ---------------- EMAIL + PASSWORD (JWT) ----------------
    path("signup/", SignUpView.as_view(), name="signup"),
    path("signin/", SignInView.as_view(), name="signin"),
    path("signout/", SignOutView.as_view(), name="signout"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    # ---------------- OAUTH PROXY (users service) ----------------
    path("oauth/<str:provider>/redirect_url/", OAuthRedirectUrlView.as_view(), name="oauth-redirect-url"),
    path("sessions/", SessionExchangeView.as_view(), name="sessions"),
    path("logout/", LogoutView.as_view(), name="logout"),
    # ---------------- AUTHENTICATED ----------------
    path("me/", MeView.as_view(), name="me"),
    path("profile/", ProfileView.as_view(), name="profile"),
]
