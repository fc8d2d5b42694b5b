# users/services/users_service.py
"""
PATH: users/services/users_service.py

EXTERNAL USERS SERVICE CLIENT (Google OAuth broker)

The users service owns the OAuth dance with Google and hands us an opaque
session token. We never see Google credentials.

Calls:
- GET    {API_URL}/oauth/{provider}/redirect_url   -> {"redirect_url": "..."}
- POST   {API_URL}/sessions {"code": "..."}        -> {"session_token": "..."}
- GET    {API_URL}/users/me   (Bearer session)     -> remote user payload
- DELETE {API_URL}/sessions   (Bearer session)     -> 204 / {}

All calls authenticate with the x-api-key header.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from django.conf import settings

from users.services.exceptions import (
    InvalidSessionError,
    UsersServiceConfigurationError,
    UsersServiceError,
)

logger = logging.getLogger(__name__)


def _cfg() -> dict:
    cfg = getattr(settings, "USERS_SERVICE", {}) or {}
    api_url = (cfg.get("API_URL") or "").strip().rstrip("/")
    api_key = (cfg.get("API_KEY") or "").strip()
    if not api_url or not api_key:
        raise UsersServiceConfigurationError(
            "Users service is not configured. "
            "Expected settings.USERS_SERVICE['API_URL'] and ['API_KEY']."
        )
    return {
        "api_url": api_url,
        "api_key": api_key,
        "timeout": int(cfg.get("TIMEOUT") or 15),
    }


def _safe_preview(text: str, limit: int = 300) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _request_json(
    method: str,
    path: str,
    *,
    body: dict | None = None,
    session_token: str | None = None,
) -> dict[str, Any]:
    cfg = _cfg()

    headers = {
        "x-api-key": cfg["api_key"],
        "Accept": "application/json",
    }
    data = None
    if body is not None:
        data = json.dumps(body).encode("utf-8")
        headers["Content-Type"] = "application/json"
    if session_token:
        headers["Authorization"] = f"Bearer {session_token}"

    req = Request(f"{cfg['api_url']}{path}", data=data, headers=headers, method=method)

    try:
        with urlopen(req, timeout=cfg["timeout"]) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        if e.code in (401, 403) and session_token:
            raise InvalidSessionError("Session token rejected by users service") from e
        detail = ""
        try:
            detail = e.read().decode("utf-8", errors="replace")
        except Exception:
            detail = ""
        raise UsersServiceError(
            f"Users service HTTPError: {e.code} {_safe_preview(detail)}"
        ) from e
    except URLError as e:
        raise UsersServiceError(f"Users service URLError: {e}") from e

    if not raw.strip():
        return {}

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise UsersServiceError(
            f"Users service returned non-JSON: {_safe_preview(raw)}"
        ) from e

    if not isinstance(parsed, dict):
        raise UsersServiceError("Users service returned an unexpected payload shape")
    return parsed


def get_oauth_redirect_url(provider: str) -> str:
    data = _request_json("GET", f"/oauth/{quote(provider, safe='')}/redirect_url")
    url = str(data.get("redirect_url") or data.get("redirectUrl") or "").strip()
    if not url:
        raise UsersServiceError("Users service did not return a redirect URL")
    return url


def exchange_code_for_session_token(code: str) -> str:
    data = _request_json("POST", "/sessions", body={"code": code})
    token = str(data.get("session_token") or "").strip()
    if not token:
        raise UsersServiceError("Users service did not return a session token")
    return token


def get_current_user(session_token: str) -> dict[str, Any]:
    """
    Resolve a session token to the remote user payload.

    The payload always carries `id` and `email`; Google profile data sits
    under `google_user_data` (name, given_name, family_name, picture).
    """
    data = _request_json("GET", "/users/me", session_token=session_token)
    if not data.get("email"):
        raise InvalidSessionError("Users service returned a user without an email")
    return data


def delete_session(session_token: str) -> None:
    _request_json("DELETE", "/sessions", session_token=session_token)
    logger.info("Remote session deleted")
