# users/authentication.py
"""
SESSION TOKEN AUTHENTICATION (users-service cookie)

Shoppers who signed in with Google carry an HttpOnly cookie holding the
users-service session token. This DRF authentication class:
- reads the cookie
- resolves it through the users service
- maps the remote account to a local User by email (created on first sight)

Failure to resolve means "not authenticated by this class" (returns None),
so JWT-only clients and anonymous catalog browsing are unaffected.

Cookie auth is ambient, so unsafe methods go through Django's CSRF check
the same way DRF's SessionAuthentication does.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import URLValidator, validate_email
from django.db import IntegrityError, transaction
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, CSRFCheck

from users.services import InvalidSessionError, UsersServiceError, get_current_user

logger = logging.getLogger(__name__)

User = get_user_model()


def session_cookie_name() -> str:
    cfg = getattr(settings, "USERS_SERVICE", {}) or {}
    return cfg.get("SESSION_COOKIE_NAME") or "lethashop_session_token"


def _profile_from_remote(remote: dict) -> dict:
    google = remote.get("google_user_data") or {}
    name = (google.get("name") or "").strip()
    if not name:
        name = " ".join(
            p for p in [google.get("given_name"), google.get("family_name")] if p
        ).strip()
    avatar_url = (google.get("picture") or "").strip()
    if avatar_url:
        try:
            URLValidator()(avatar_url)
        except ValidationError:
            avatar_url = ""
    return {
        "name": name[:150],
        "avatar_url": avatar_url if len(avatar_url) <= 500 else "",
    }


def local_user_for_remote(remote: dict):
    """
    Find or create the local account for a users-service identity.
    Existing profile fields are only filled in, never overwritten.
    """
    email = User.objects.normalize_email(str(remote.get("email") or "").strip())
    try:
        validate_email(email)
    except ValidationError:
        raise InvalidSessionError("Users service returned an account without a valid email")
    profile = _profile_from_remote(remote)

    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        try:
            with transaction.atomic():
                user = User.objects.create_user(email=email, password=None, **profile)
        except IntegrityError:
            user = User.objects.get(email__iexact=email)
        logger.info("Local account created from users service", extra={"user_id": str(user.id)})
        return user

    touched = []
    for field, value in profile.items():
        if value and not getattr(user, field):
            setattr(user, field, value)
            touched.append(field)
    if touched:
        user.save(update_fields=[*touched, "updated_at"])
    return user


class SessionTokenAuthentication(BaseAuthentication):
    def authenticate(self, request):
        token = request.COOKIES.get(session_cookie_name())
        if not token:
            return None

        try:
            remote = get_current_user(token)
        except InvalidSessionError:
            logger.info("Rejected users-service session cookie")
            return None
        except UsersServiceError:
            logger.warning("Users service unavailable during cookie auth", exc_info=True)
            return None

        try:
            user = local_user_for_remote(remote)
        except (InvalidSessionError, ValidationError):
            logger.warning("Users-service profile could not be mapped to a local account", exc_info=True)
            return None
        if not user.is_active:
            raise exceptions.AuthenticationFailed("User account is disabled")

        self.enforce_csrf(request)
        return (user, token)

    def enforce_csrf(self, request):
        def dummy_get_response(request):  # pragma: no cover
            return None

        check = CSRFCheck(dummy_get_response)
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
