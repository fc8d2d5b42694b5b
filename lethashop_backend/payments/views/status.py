# payments/views/status.py

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from payments.models import PaymentRequest
from payments.serializers import PaymentRequestSerializer
from payments.services import expire_stale_requests
from permissions.roles import CAP_ORDERS_MANAGE, user_has_capability


class PaymentPollThrottle(UserRateThrottle):
    scope = "payment_poll"


class PaymentStatusView(APIView):
    """
    GET /api/payments/<id>/ : status of one STK Push (owner or admin).
    Stale pending requests are expired before answering.
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [PaymentPollThrottle]

    @extend_schema(
        tags=["Payments"],
        responses={200: PaymentRequestSerializer, 404: OpenApiResponse(description="Not found")},
    )
    def get(self, request, pk):
        qs = PaymentRequest.objects.select_related("order")
        if not user_has_capability(request.user, CAP_ORDERS_MANAGE):
            qs = qs.filter(order__user=request.user)

        payment = get_object_or_404(qs, pk=pk)
        if payment.is_stale():
            expire_stale_requests(order=payment.order)
            payment.refresh_from_db()
            payment.order.refresh_from_db()

        return Response(PaymentRequestSerializer(payment).data)
