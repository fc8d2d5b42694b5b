# users/views/oauth.py
"""
OAUTH PROXY VIEWS (users service)

Flow:
1) SPA asks for the provider redirect URL and sends the browser there.
2) Provider bounces back to the SPA with ?code=...
3) SPA POSTs the code to /sessions; we exchange it for a session token and
   set it as an HttpOnly cookie (SameSite=None; Secure, 60 days).
4) /logout deletes the remote session and expires the cookie.
"""

from __future__ import annotations

import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from backend.responses import error_response
from users.authentication import session_cookie_name
from users.serializers import SessionExchangeSerializer
from users.services import (
    UsersServiceError,
    delete_session,
    exchange_code_for_session_token,
    get_oauth_redirect_url,
)

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = {"google"}


class OAuthAnonThrottle(AnonRateThrottle):
    scope = "auth"


def _cookie_max_age() -> int:
    cfg = getattr(settings, "USERS_SERVICE", {}) or {}
    return int(cfg.get("COOKIE_MAX_AGE") or 60 * 24 * 60 * 60)


def _users_service_unavailable():
    return error_response(
        code="USERS_SERVICE_ERROR",
        message="Sign-in service is unavailable. Please try again.",
        http_status=status.HTTP_502_BAD_GATEWAY,
    )


class OAuthRedirectUrlView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [OAuthAnonThrottle]

    @extend_schema(
        tags=["Auth"],
        responses={
            200: OpenApiResponse(description='{"redirectUrl": "..."}'),
            404: OpenApiResponse(description="Unsupported provider"),
            502: OpenApiResponse(description="Users service error"),
        },
    )
    def get(self, request, provider: str):
        provider = (provider or "").strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            return error_response(
                code="UNSUPPORTED_PROVIDER",
                message=f"OAuth provider '{provider}' is not supported.",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        try:
            redirect_url = get_oauth_redirect_url(provider)
        except UsersServiceError:
            logger.exception("OAuth redirect URL lookup failed", extra={"provider": provider})
            return _users_service_unavailable()

        return Response({"redirectUrl": redirect_url}, status=status.HTTP_200_OK)


class SessionExchangeView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [OAuthAnonThrottle]

    @extend_schema(
        tags=["Auth"],
        request=SessionExchangeSerializer,
        responses={
            200: OpenApiResponse(description='{"success": true} + Set-Cookie'),
            502: OpenApiResponse(description="Users service error"),
        },
    )
    def post(self, request):
        serializer = SessionExchangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session_token = exchange_code_for_session_token(serializer.validated_data["code"])
        except UsersServiceError:
            logger.exception("OAuth code exchange failed")
            return _users_service_unavailable()

        response = Response({"success": True}, status=status.HTTP_200_OK)
        response.set_cookie(
            session_cookie_name(),
            session_token,
            max_age=_cookie_max_age(),
            path="/",
            secure=True,
            httponly=True,
            samesite="None",
        )
        return response


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["Auth"],
        responses={200: OpenApiResponse(description='{"success": true}')},
    )
    def get(self, request):
        session_token = request.COOKIES.get(session_cookie_name())

        if session_token:
            try:
                delete_session(session_token)
            except UsersServiceError:
                # The cookie is cleared regardless; the remote session expires on its own.
                logger.warning("Remote session delete failed", exc_info=True)

        response = Response({"success": True}, status=status.HTTP_200_OK)
        response.delete_cookie(session_cookie_name(), path="/", samesite="None")
        return response
