# payments/urls.py

"""
PAYMENT URLS (mounted at /api/payments/)

- mpesa/stkpush/    POST  (auth)
- mpesa/callback/   POST  (Safaricom; token in query string)
- <id>/             GET   (owner / admin)
"""

from django.urls import path

from payments.views import MpesaCallbackView, PaymentStatusView, StkPushView

urlpatterns = [
    path("mpesa/stkpush/", StkPushView.as_view(), name="mpesa-stkpush"),
    path("mpesa/callback/", MpesaCallbackView.as_view(), name="mpesa-callback"),
    path("<uuid:pk>/", PaymentStatusView.as_view(), name="payment-status"),
]
