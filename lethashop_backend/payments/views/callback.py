# payments/views/callback.py

"""
M-PESA CALLBACK

POST /api/payments/mpesa/callback/?token=<MPESA_CALLBACK_TOKEN>

Safaricom retries callbacks that are not acknowledged, so this endpoint
ALWAYS answers {"ResultCode": 0, "ResultDesc": "Accepted"}, even for
unknown or duplicate ids and internal errors (those are logged).
The only rejection is a wrong callback token (403).
"""

from __future__ import annotations

import hmac
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from payments.services import handle_callback

logger = logging.getLogger(__name__)

ACK = {"ResultCode": 0, "ResultDesc": "Accepted"}


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


def _token_ok(request) -> bool:
    expected = str(settings.MPESA.get("CALLBACK_TOKEN") or "").strip()
    if not expected:
        return True
    supplied = str(request.query_params.get("token") or "").strip()
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


class MpesaCallbackView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [JSONParser]
    throttle_classes = [WebhookThrottle]

    def post(self, request, *args, **kwargs):
        if not _token_ok(request):
            logger.warning("M-Pesa callback with invalid token")
            return Response(
                {"ResultCode": 1, "ResultDesc": "Rejected"},
                status=status.HTTP_403_FORBIDDEN,
            )

        logger.info("M-Pesa callback received")

        try:
            payload = request.data if isinstance(request.data, dict) else {}
            outcome = handle_callback(payload)
        except Exception:
            logger.exception("M-Pesa callback processing failed")
            return Response(ACK, status=status.HTTP_200_OK)

        logger.info("M-Pesa callback processed", extra={"outcome": outcome})
        return Response(ACK, status=status.HTTP_200_OK)
