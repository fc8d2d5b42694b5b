# users/views/auth.py
"""
EMAIL + PASSWORD AUTH VIEWS (JWT)

- POST /api/auth/signup/   -> user + access/refresh
- POST /api/auth/signin/   -> user + access/refresh
- POST /api/auth/signout/  -> blacklist refresh (if given), clear session cookie

Security hardening:
- Targeted throttling on anonymous credential endpoints (scope "auth").
- authentication_classes = [] on signup/signin so a stale/broken bearer
  token never blocks a fresh login.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from users.authentication import session_cookie_name
from users.serializers import (
    AuthResponseSerializer,
    SignInSerializer,
    SignOutSerializer,
    SignUpSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


# ---------------- THROTTLES (TARGETED) ----------------
class AuthAnonThrottle(AnonRateThrottle):
    """
    Anonymous signup/signin throttling.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['auth'].
    """
    scope = "auth"


def _token_payload(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "user": UserSerializer(user).data,
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


# ---------------- SIGN UP ----------------
class SignUpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        tags=["Auth"],
        request=SignUpSerializer,
        responses={
            201: AuthResponseSerializer,
            400: OpenApiResponse(description="Validation error / email taken"),
        },
    )
    def post(self, request):
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("User signed up", extra={"user_id": str(user.id), "role": user.role})

        return Response(_token_payload(user), status=status.HTTP_201_CREATED)


# ---------------- SIGN IN ----------------
class SignInView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        tags=["Auth"],
        request=SignInSerializer,
        responses={
            200: AuthResponseSerializer,
            400: OpenApiResponse(description="Invalid email or password"),
            403: OpenApiResponse(description="Account disabled"),
        },
    )
    def post(self, request):
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = User.objects.normalize_email(serializer.validated_data["email"].strip())
        password = serializer.validated_data["password"]

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            return Response(
                {"detail": "Invalid email or password"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if not user.is_active:
            return Response(
                {"detail": "User account is disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )

        return Response(_token_payload(user), status=status.HTTP_200_OK)


# ---------------- SIGN OUT ----------------
class SignOutView(APIView):
    """
    Stateless JWT sign-out: blacklist the refresh token so it cannot mint
    new access tokens. Always clears the users-service cookie as well.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["Auth"],
        request=SignOutSerializer,
        responses={200: OpenApiResponse(description="Signed out")},
    )
    def post(self, request):
        serializer = SignOutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        raw_refresh = (serializer.validated_data.get("refresh") or "").strip()
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError:
                logger.info("Sign-out with invalid or expired refresh token")

        response = Response({"success": True}, status=status.HTTP_200_OK)
        response.delete_cookie(session_cookie_name(), path="/", samesite="None")
        return response
