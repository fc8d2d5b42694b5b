# payments/views/stkpush.py

"""
STK PUSH VIEW

POST /api/payments/mpesa/stkpush/  {order_id, phone_number}

Rules:
- Only the order's owner can pay for it.
- Amount = order total rounded UP to whole shillings (server-side).
- A FAILED order may be retried; it goes back to PENDING.
- Safaricom failure -> 502 and no PaymentRequest row.
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from backend.responses import error_response
from orders.models import Order
from payments.serializers import StkPushRequestSerializer, StkPushResponseSerializer
from payments.services import (
    InvalidPhoneNumber,
    MpesaConfigurationError,
    MpesaError,
    OrderNotPayable,
    start_stk_push,
)

logger = logging.getLogger(__name__)

SAFARICOM_FIELDS = (
    "MerchantRequestID",
    "CheckoutRequestID",
    "ResponseCode",
    "ResponseDescription",
    "CustomerMessage",
)


class PaymentWriteThrottle(UserRateThrottle):
    """
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['payment_write'].
    """

    scope = "payment_write"


class StkPushView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [PaymentWriteThrottle]

    @extend_schema(
        tags=["Payments"],
        request=StkPushRequestSerializer,
        responses={
            200: StkPushResponseSerializer,
            400: OpenApiResponse(description="Invalid phone / order not payable"),
            404: OpenApiResponse(description="Order not found"),
            502: OpenApiResponse(description="M-Pesa error"),
        },
    )
    def post(self, request, *args, **kwargs):
        s = StkPushRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        order = get_object_or_404(Order, id=data["order_id"], user=request.user)

        try:
            payment, response = start_stk_push(order=order, phone_number=data["phone_number"])
        except InvalidPhoneNumber as exc:
            return error_response(
                code="INVALID_PHONE_NUMBER",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderNotPayable as exc:
            return error_response(
                code="ORDER_NOT_PAYABLE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except MpesaConfigurationError:
            logger.exception("M-Pesa is not configured")
            return error_response(
                code="MPESA_NOT_CONFIGURED",
                message="Mobile payments are temporarily unavailable.",
                http_status=status.HTTP_502_BAD_GATEWAY,
            )
        except MpesaError as exc:
            logger.warning(
                "STK push failed",
                extra={"order_id": str(order.id), "error": str(exc)},
            )
            return error_response(
                code="MPESA_ERROR",
                message=str(exc),
                http_status=status.HTTP_502_BAD_GATEWAY,
            )

        body = {k: str(response.get(k) or "") for k in SAFARICOM_FIELDS}
        body.update(
            {
                "payment_request_id": str(payment.id),
                "order_id": str(order.id),
                "amount": payment.amount,
            }
        )
        return Response(body, status=status.HTTP_200_OK)
