from .admin import AdminUserViewSet
from .auth import SignInView, SignOutView, SignUpView
from .me import MeView, ProfileView
from .oauth import LogoutView, OAuthRedirectUrlView, SessionExchangeView

__all__ = [
    "SignUpView",
    "SignInView",
    "SignOutView",
    "MeView",
    "ProfileView",
    "OAuthRedirectUrlView",
    "SessionExchangeView",
    "LogoutView",
    "AdminUserViewSet",
]
