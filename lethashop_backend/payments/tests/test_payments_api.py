# payments/tests/test_payments_api.py

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from orders.models import Order, OrderItem
from payments.models import PaymentRequest
from payments.services import MpesaError
from products.models import Product

User = get_user_model()

MPESA = {
    "ENVIRONMENT": "sandbox",
    "CONSUMER_KEY": "ck",
    "CONSUMER_SECRET": "cs",
    "SHORTCODE": "174379",
    "PASSKEY": "pk",
    "CALLBACK_URL": "https://shop.example.com/api/payments/mpesa/callback/",
    "CALLBACK_TOKEN": "s3cret",
    "TRANSACTION_TYPE": "CustomerPayBillOnline",
    "REQUEST_TIMEOUT": 5,
    "PAYMENT_TIMEOUT_SECONDS": 300,
}

STK_OK = {
    "MerchantRequestID": "29115-34620561-1",
    "CheckoutRequestID": "ws_CO_191220191020363925",
    "ResponseCode": "0",
    "ResponseDescription": "Success. Request accepted for processing",
    "CustomerMessage": "Success. Request accepted for processing",
}

CALLBACK_URL = "/api/payments/mpesa/callback/?token=s3cret"


def _callback(checkout_request_id, *, result_code=0, amount=115, receipt="NLJ7RT61SV"):
    stk = {
        "MerchantRequestID": "29115-34620561-1",
        "CheckoutRequestID": checkout_request_id,
        "ResultCode": result_code,
        "ResultDesc": "The service request is processed successfully."
        if result_code == 0
        else "Request cancelled by user",
    }
    if result_code == 0:
        stk["CallbackMetadata"] = {
            "Item": [
                {"Name": "Amount", "Value": amount},
                {"Name": "MpesaReceiptNumber", "Value": receipt},
                {"Name": "TransactionDate", "Value": 20191219102115},
                {"Name": "PhoneNumber", "Value": 254708374149},
            ]
        }
    return {"Body": {"stkCallback": stk}}


@override_settings(MPESA=MPESA)
class PaymentFlowTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="achieng@example.com", password="secret12")
        self.other = User.objects.create_user(email="mallory@example.com", password="secret12")

        self.belt = Product.objects.create(
            name="Leather Belt", price=Decimal("49.99"), inventory_quantity=10
        )
        # 2 x 49.99 + 15.00 shipping
        self.order = Order.objects.create(
            user=self.user,
            subtotal_amount=Decimal("99.98"),
            shipping_amount=Decimal("15.00"),
            total_amount=Decimal("114.98"),
        )
        OrderItem.objects.create(
            order=self.order,
            product=self.belt,
            product_name=self.belt.name,
            quantity=2,
            price=self.belt.price,
            line_total=Decimal("99.98"),
        )

    def _payment(self, **kwargs):
        defaults = {
            "order": self.order,
            "phone_number": "254712345678",
            "amount": 115,
            "checkout_request_id": STK_OK["CheckoutRequestID"],
            "merchant_request_id": STK_OK["MerchantRequestID"],
        }
        defaults.update(kwargs)
        return PaymentRequest.objects.create(**defaults)


class StkPushTests(PaymentFlowTestBase):
    """
    GUARANTEES:
    - Only the order owner can start a payment
    - Amount is the order total rounded up to whole shillings
    - Provider failure -> 502 and no PaymentRequest
    """

    @mock.patch("payments.services.processing.initiate_stk_push", return_value=STK_OK)
    def test_stk_push_creates_pending_request(self, push):
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678", "amount": 1},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["ResponseCode"], "0")
        self.assertEqual(res.data["CheckoutRequestID"], STK_OK["CheckoutRequestID"])
        self.assertEqual(res.data["amount"], 115)

        kwargs = push.call_args.kwargs
        self.assertEqual(kwargs["amount"], 115)
        self.assertEqual(kwargs["phone_number"], "254712345678")
        self.assertEqual(kwargs["account_reference"], self.order.order_number)

        payment = PaymentRequest.objects.get(id=res.data["payment_request_id"])
        self.assertEqual(payment.status, PaymentRequest.STATUS_PENDING)
        self.assertEqual(payment.amount, 115)

    @mock.patch("payments.services.processing.initiate_stk_push", return_value=STK_OK)
    def test_only_owner_can_pay(self, push):
        self.client.force_authenticate(self.other)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678"},
            format="json",
        )
        self.assertEqual(res.status_code, 404)
        push.assert_not_called()

    @mock.patch(
        "payments.services.processing.initiate_stk_push",
        side_effect=MpesaError("Invalid Access Token"),
    )
    def test_provider_failure_is_502(self, push):
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678"},
            format="json",
        )
        self.assertEqual(res.status_code, 502)
        self.assertEqual(res.data["error"]["code"], "MPESA_ERROR")
        self.assertFalse(PaymentRequest.objects.exists())

    @mock.patch("payments.services.processing.initiate_stk_push", return_value=STK_OK)
    def test_invalid_phone_is_400(self, push):
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "12345"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_PHONE_NUMBER")
        push.assert_not_called()

    @mock.patch("payments.services.processing.initiate_stk_push", return_value=STK_OK)
    def test_paid_order_not_payable(self, push):
        Order.objects.filter(pk=self.order.pk).update(status=Order.STATUS_PAID)
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_PAYABLE")

    @mock.patch("payments.services.processing.initiate_stk_push")
    def test_order_cancelled_during_push_gets_no_request(self, push):
        def cancel_then_accept(**kwargs):
            Order.objects.filter(pk=self.order.pk).update(status=Order.STATUS_CANCELLED)
            return STK_OK

        push.side_effect = cancel_then_accept
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_PAYABLE")
        self.assertFalse(PaymentRequest.objects.exists())
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_CANCELLED)

    @mock.patch("payments.services.processing.initiate_stk_push", return_value=STK_OK)
    def test_failed_order_is_reset_to_pending(self, push):
        Order.objects.filter(pk=self.order.pk).update(status=Order.STATUS_FAILED)
        self.client.force_authenticate(self.user)
        res = self.client.post(
            "/api/payments/mpesa/stkpush/",
            {"order_id": str(self.order.id), "phone_number": "0712345678"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)


class CallbackTests(PaymentFlowTestBase):
    """
    GUARANTEES:
    - Always acknowledges Safaricom (except a wrong token)
    - Success marks the order paid and decrements stock exactly once
    - Failure / amount mismatch marks the order failed
    """

    def _post(self, payload, url=CALLBACK_URL):
        return APIClient().post(url, payload, format="json")

    def test_success_marks_order_paid(self):
        payment = self._payment()

        res = self._post(_callback(payment.checkout_request_id))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"ResultCode": 0, "ResultDesc": "Accepted"})

        payment.refresh_from_db()
        self.order.refresh_from_db()
        self.belt.refresh_from_db()
        self.assertEqual(payment.status, PaymentRequest.STATUS_COMPLETED)
        self.assertEqual(payment.mpesa_receipt_number, "NLJ7RT61SV")
        self.assertEqual(payment.result_code, 0)
        self.assertEqual(self.order.status, Order.STATUS_PAID)
        self.assertIsNotNone(self.order.paid_at)
        self.assertEqual(self.belt.inventory_quantity, 8)

    def test_duplicate_callback_is_idempotent(self):
        payment = self._payment()
        self._post(_callback(payment.checkout_request_id))
        res = self._post(_callback(payment.checkout_request_id))

        self.assertEqual(res.status_code, 200)
        self.belt.refresh_from_db()
        self.assertEqual(self.belt.inventory_quantity, 8)

    def test_cancelled_by_user_marks_failed(self):
        payment = self._payment()
        res = self._post(_callback(payment.checkout_request_id, result_code=1032))
        self.assertEqual(res.status_code, 200)

        payment.refresh_from_db()
        self.order.refresh_from_db()
        self.assertEqual(payment.status, PaymentRequest.STATUS_FAILED)
        self.assertEqual(payment.result_code, 1032)
        self.assertEqual(self.order.status, Order.STATUS_FAILED)

    def test_amount_mismatch_marks_failed(self):
        payment = self._payment()
        self._post(_callback(payment.checkout_request_id, amount=1))

        payment.refresh_from_db()
        self.order.refresh_from_db()
        self.belt.refresh_from_db()
        self.assertEqual(payment.status, PaymentRequest.STATUS_FAILED)
        self.assertIn("Amount mismatch", payment.result_desc)
        self.assertEqual(self.order.status, Order.STATUS_FAILED)
        self.assertEqual(self.belt.inventory_quantity, 10)

    def test_unknown_checkout_id_is_acknowledged(self):
        res = self._post(_callback("ws_CO_unknown"))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["ResultCode"], 0)

    def test_malformed_payload_is_acknowledged(self):
        res = self._post({"hello": "world"})
        self.assertEqual(res.status_code, 200)

    def test_wrong_token_is_403(self):
        payment = self._payment()
        res = self._post(
            _callback(payment.checkout_request_id),
            url="/api/payments/mpesa/callback/?token=nope",
        )
        self.assertEqual(res.status_code, 403)
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentRequest.STATUS_PENDING)


class ExpiryTests(PaymentFlowTestBase):
    """
    GUARANTEES:
    - A pending request older than the timeout expires and fails the order
    - Expiry happens on poll and via the expire_payments command
    """

    def _age(self, payment, seconds):
        PaymentRequest.objects.filter(pk=payment.pk).update(
            created_at=timezone.now() - timedelta(seconds=seconds)
        )

    def test_fresh_request_stays_pending_on_poll(self):
        payment = self._payment()
        self.client.force_authenticate(self.user)

        res = self.client.get(f"/api/orders/{self.order.id}/status/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["payment_status"], "pending")

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentRequest.STATUS_PENDING)

    def test_stale_request_expires_on_poll(self):
        payment = self._payment()
        self._age(payment, 301)
        self.client.force_authenticate(self.user)

        res = self.client.get(f"/api/orders/{self.order.id}/status/")
        self.assertEqual(res.data["status"], "failed")
        self.assertEqual(res.data["payment_status"], "expired")

    def test_paid_order_reported_on_poll(self):
        payment = self._payment()
        APIClient().post(CALLBACK_URL, _callback(payment.checkout_request_id), format="json")
        self.client.force_authenticate(self.user)

        res = self.client.get(f"/api/orders/{self.order.id}/status/")
        self.assertEqual(res.data["status"], "paid")
        self.assertEqual(res.data["payment_status"], "completed")
        self.assertIsNotNone(res.data["paid_at"])

    def test_late_success_after_expiry_still_pays(self):
        payment = self._payment()
        self._age(payment, 400)
        call_command("expire_payments", verbosity=0)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_FAILED)

        APIClient().post(CALLBACK_URL, _callback(payment.checkout_request_id), format="json")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PAID)

    def test_expire_payments_command(self):
        stale = self._payment()
        self._age(stale, 600)

        other_order = Order.objects.create(user=self.user, total_amount=Decimal("60.00"))
        fresh = self._payment(order=other_order, checkout_request_id="ws_CO_fresh")

        call_command("expire_payments", verbosity=0)

        stale.refresh_from_db()
        fresh.refresh_from_db()
        other_order.refresh_from_db()
        self.assertEqual(stale.status, PaymentRequest.STATUS_EXPIRED)
        self.assertEqual(fresh.status, PaymentRequest.STATUS_PENDING)
        self.assertEqual(other_order.status, Order.STATUS_PENDING)

    def test_payment_status_endpoint(self):
        payment = self._payment()

        self.client.force_authenticate(self.other)
        res = self.client.get(f"/api/payments/{payment.id}/")
        self.assertEqual(res.status_code, 404)

        self.client.force_authenticate(self.user)
        res = self.client.get(f"/api/payments/{payment.id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["order_number"], self.order.order_number)

        self._age(payment, 301)
        res = self.client.get(f"/api/payments/{payment.id}/")
        self.assertEqual(res.data["status"], "expired")
        self.assertEqual(res.data["order_status"], "failed")
