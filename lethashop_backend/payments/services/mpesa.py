# payments/services/mpesa.py

"""
SAFARICOM M-PESA (DARAJA) CLIENT

Covers the three calls the storefront needs:
- OAuth token      GET  /oauth/v1/generate?grant_type=client_credentials
- STK Push         POST /mpesa/stkpush/v1/processrequest
- helpers          phone normalisation, password, timestamp

Environment (settings.MPESA["ENVIRONMENT"]):
- "sandbox"     -> https://sandbox.safaricom.co.ke
- "production"  -> https://api.safaricom.co.ke

Secrets (consumer key/secret, passkey) are never logged.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl
from urllib.request import Request, urlopen

from django.conf import settings
from django.utils import timezone

from payments.services.exceptions import (
    InvalidPhoneNumber,
    MpesaConfigurationError,
    MpesaError,
)

logger = logging.getLogger(__name__)

BASE_URLS = {
    "sandbox": "https://sandbox.safaricom.co.ke",
    "production": "https://api.safaricom.co.ke",
}

_NON_DIGITS = re.compile(r"\D")


# =====================================================
# CONFIG
# =====================================================

def _mpesa_cfg() -> dict:
    return getattr(settings, "MPESA", {}) or {}


def _require(key: str) -> str:
    value = str(_mpesa_cfg().get(key) or "").strip()
    if not value:
        raise MpesaConfigurationError(f"MPESA {key} is not configured")
    return value


def base_url() -> str:
    env = str(_mpesa_cfg().get("ENVIRONMENT") or "sandbox").strip().lower()
    if env not in BASE_URLS:
        raise MpesaConfigurationError(f"Unknown MPESA ENVIRONMENT: {env!r}")
    return BASE_URLS[env]


def _timeout() -> int:
    return int(_mpesa_cfg().get("REQUEST_TIMEOUT") or 30)


def callback_url() -> str:
    """
    Configured callback URL with ?token=<CALLBACK_TOKEN> appended when a token
    is set; the callback view rejects requests that do not carry it.
    """
    url = _require("CALLBACK_URL")
    token = str(_mpesa_cfg().get("CALLBACK_TOKEN") or "").strip()
    if not token:
        return url

    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "token"]
    query.append(("token", token))
    return urlunsplit(parts._replace(query=urlencode(query)))


# =====================================================
# HELPERS
# =====================================================

def format_phone_number(raw) -> str:
    """
    Normalise a Kenyan mobile number to 254XXXXXXXXX.

    Accepts 07XXXXXXXX, 01XXXXXXXX, 2547XXXXXXXX, +254 7XX XXX XXX and bare
    7XXXXXXXX. Anything else raises InvalidPhoneNumber.
    """
    digits = _NON_DIGITS.sub("", str(raw or ""))

    if digits.startswith("0") and len(digits) == 10:
        digits = "254" + digits[1:]
    elif len(digits) == 9:
        digits = "254" + digits

    if len(digits) != 12 or not digits.startswith("254"):
        raise InvalidPhoneNumber(f"Invalid phone number: {raw}")
    return digits


def mpesa_timestamp(now=None) -> str:
    now = now or timezone.now()
    return timezone.localtime(now).strftime("%Y%m%d%H%M%S")


def build_password(shortcode: str, passkey: str, timestamp: str) -> str:
    raw = f"{shortcode}{passkey}{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


# =====================================================
# HTTP
# =====================================================

def _request_json(
    method: str,
    url: str,
    *,
    headers: dict[str, str],
    body: dict | None = None,
) -> dict[str, Any]:
    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")

    req = Request(
        url,
        data=data,
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
            **headers,
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=_timeout()) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""
        try:
            j = json.loads(raw) if raw else {}
        except ValueError:
            j = {}
        msg = ""
        if isinstance(j, dict):
            msg = j.get("errorMessage") or j.get("ResponseDescription") or ""
        raise MpesaError(f"M-Pesa HTTPError: {e.code} {msg or _safe_preview(raw)}") from e
    except URLError as e:
        raise MpesaError(f"M-Pesa URLError: {e.reason}") from e
    except OSError as e:
        raise MpesaError(f"M-Pesa request failed: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise MpesaError(f"M-Pesa returned non-JSON: {_safe_preview(raw)}") from e

    if not isinstance(parsed, dict):
        raise MpesaError("M-Pesa returned an unexpected payload")
    return parsed


# =====================================================
# API CALLS
# =====================================================

def get_access_token() -> str:
    key = _require("CONSUMER_KEY")
    secret = _require("CONSUMER_SECRET")
    basic = base64.b64encode(f"{key}:{secret}".encode("utf-8")).decode("ascii")

    parsed = _request_json(
        "GET",
        f"{base_url()}/oauth/v1/generate?grant_type=client_credentials",
        headers={"Authorization": f"Basic {basic}"},
    )

    token = str(parsed.get("access_token") or "").strip()
    if not token:
        raise MpesaError("M-Pesa OAuth response did not include an access_token")
    return token


def initiate_stk_push(
    *,
    phone_number: str,
    amount: int,
    account_reference: str,
    transaction_desc: str,
) -> dict:
    """
    Send an STK Push prompt to the customer's phone.

    Returns Safaricom's response (MerchantRequestID, CheckoutRequestID,
    ResponseCode, ResponseDescription, CustomerMessage).
    Raises MpesaError when ResponseCode is not "0".
    """
    shortcode = _require("SHORTCODE")
    passkey = _require("PASSKEY")
    cb_url = callback_url()
    phone = format_phone_number(phone_number)
    timestamp = mpesa_timestamp()

    payload = {
        "BusinessShortCode": shortcode,
        "Password": build_password(shortcode, passkey, timestamp),
        "Timestamp": timestamp,
        "TransactionType": _mpesa_cfg().get("TRANSACTION_TYPE") or "CustomerPayBillOnline",
        "Amount": int(amount),
        "PartyA": phone,
        "PartyB": shortcode,
        "PhoneNumber": phone,
        "CallBackURL": cb_url,
        "AccountReference": str(account_reference)[:64],
        "TransactionDesc": str(transaction_desc)[:255],
    }

    token = get_access_token()
    parsed = _request_json(
        "POST",
        f"{base_url()}/mpesa/stkpush/v1/processrequest",
        headers={"Authorization": f"Bearer {token}"},
        body=payload,
    )

    if str(parsed.get("ResponseCode")) != "0":
        msg = parsed.get("errorMessage") or parsed.get("ResponseDescription") or "STK Push rejected"
        raise MpesaError(str(msg))

    logger.info(
        "STK push accepted",
        extra={
            "checkout_request_id": parsed.get("CheckoutRequestID"),
            "merchant_request_id": parsed.get("MerchantRequestID"),
            "amount": int(amount),
        },
    )
    return parsed
