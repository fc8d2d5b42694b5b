# payments/services/processing.py

"""
PAYMENT PROCESSING

Glue between the M-Pesa client and the order lifecycle.

- start_stk_push()          order -> STK Push -> PENDING PaymentRequest
- handle_callback()         Safaricom callback -> COMPLETED / FAILED (+ order)
- expire_stale_requests()   PENDING older than the timeout -> EXPIRED (+ order)

Idempotency:
- A request is settled at most once; repeated callbacks are acknowledged
  and ignored.
"""

from __future__ import annotations

import logging
from decimal import ROUND_CEILING, Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from orders.models import Order
from orders.services import InvalidStatusTransition, mark_failed, mark_paid, transition_order
from payments.models import PaymentRequest
from payments.services.exceptions import MpesaError, OrderNotPayable
from payments.services.mpesa import format_phone_number, initiate_stk_push

logger = logging.getLogger(__name__)

PAYABLE_ORDER_STATUSES = {Order.STATUS_PENDING, Order.STATUS_FAILED}
SETTLED_STATUSES = {PaymentRequest.STATUS_COMPLETED, PaymentRequest.STATUS_FAILED}


def whole_shillings(amount) -> int:
    return int(Decimal(str(amount)).to_integral_value(rounding=ROUND_CEILING))


def latest_payment_for(order: Order) -> PaymentRequest | None:
    return order.payment_requests.order_by("-created_at").first()


# =====================================================
# STK PUSH
# =====================================================

def start_stk_push(*, order: Order, phone_number: str) -> tuple[PaymentRequest, dict]:
    if order.status not in PAYABLE_ORDER_STATUSES:
        raise OrderNotPayable(f"Order {order.order_number} is {order.status} and cannot be paid")

    phone = format_phone_number(phone_number)
    amount = max(whole_shillings(order.total_amount), 1)
    account_reference = order.order_number
    transaction_desc = f"LethaShop Order {order.order_number}"

    # No DB transaction is held open while Safaricom is called
    response = initiate_stk_push(
        phone_number=phone,
        amount=amount,
        account_reference=account_reference,
        transaction_desc=transaction_desc,
    )

    checkout_request_id = str(response.get("CheckoutRequestID") or "").strip()
    if not checkout_request_id:
        raise MpesaError("M-Pesa response did not include a CheckoutRequestID")

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        # The order may have been paid or cancelled while Safaricom was called
        if locked.status not in PAYABLE_ORDER_STATUSES:
            logger.warning(
                "Order stopped being payable during STK Push",
                extra={
                    "order_id": str(locked.id),
                    "status": locked.status,
                    "checkout_request_id": checkout_request_id,
                },
            )
            raise OrderNotPayable(
                f"Order {locked.order_number} is {locked.status} and cannot be paid"
            )
        if locked.status == Order.STATUS_FAILED:
            transition_order(locked, Order.STATUS_PENDING)

        payment = PaymentRequest.objects.create(
            order=locked,
            phone_number=phone,
            amount=amount,
            account_reference=account_reference,
            transaction_desc=transaction_desc,
            merchant_request_id=str(response.get("MerchantRequestID") or ""),
            checkout_request_id=checkout_request_id,
            status=PaymentRequest.STATUS_PENDING,
            raw_response=response,
        )

    logger.info(
        "Payment request created",
        extra={
            "payment_request_id": str(payment.id),
            "order_id": str(order.id),
            "checkout_request_id": checkout_request_id,
            "amount": amount,
        },
    )
    return payment, response


# =====================================================
# CALLBACK
# =====================================================

def _metadata(stk_callback: dict) -> dict:
    items = (stk_callback.get("CallbackMetadata") or {}).get("Item") or []
    out = {}
    for item in items:
        if isinstance(item, dict) and item.get("Name"):
            out[item["Name"]] = item.get("Value")
    return out


def _safe_order_move(func, order: Order, **kwargs) -> None:
    try:
        func(order, **kwargs)
    except InvalidStatusTransition as exc:
        logger.warning(
            "Order not moved by payment callback",
            extra={"order_id": str(order.id), "reason": str(exc)},
        )


def handle_callback(payload: dict) -> str:
    """
    Apply a Safaricom STK callback. Returns a short outcome label
    ("ignored", "unknown", "duplicate", "completed", "failed") for logging
    and tests.
    """
    stk = ((payload or {}).get("Body") or {}).get("stkCallback") or {}
    checkout_request_id = str(stk.get("CheckoutRequestID") or "").strip()
    if not checkout_request_id:
        logger.warning("M-Pesa callback without CheckoutRequestID")
        return "ignored"

    try:
        result_code = int(stk.get("ResultCode"))
    except (TypeError, ValueError):
        result_code = -1
    result_desc = str(stk.get("ResultDesc") or "")[:255]

    with transaction.atomic():
        payment = (
            PaymentRequest.objects.select_for_update()
            .select_related("order")
            .filter(checkout_request_id=checkout_request_id)
            .first()
        )

        if payment is None:
            logger.warning(
                "Unknown CheckoutRequestID in callback",
                extra={"checkout_request_id": checkout_request_id},
            )
            return "unknown"

        if payment.status in SETTLED_STATUSES:
            logger.info(
                "Duplicate M-Pesa callback ignored",
                extra={"checkout_request_id": checkout_request_id, "status": payment.status},
            )
            return "duplicate"

        payment.raw_callback = payload
        payment.result_code = result_code
        payment.result_desc = result_desc
        order = payment.order

        if result_code == 0:
            meta = _metadata(stk)
            paid_amount = meta.get("Amount")
            try:
                mismatch = paid_amount is not None and Decimal(str(paid_amount)) != Decimal(
                    payment.amount
                )
            except InvalidOperation:
                mismatch = True

            if mismatch:
                logger.error(
                    "M-Pesa amount mismatch",
                    extra={
                        "checkout_request_id": checkout_request_id,
                        "expected": payment.amount,
                        "received": str(paid_amount),
                    },
                )
                payment.status = PaymentRequest.STATUS_FAILED
                payment.result_desc = f"Amount mismatch: got {paid_amount}, expected {payment.amount}"
                payment.save()
                _safe_order_move(mark_failed, order, reason="amount_mismatch")
                return "failed"

            payment.status = PaymentRequest.STATUS_COMPLETED
            payment.mpesa_receipt_number = str(meta.get("MpesaReceiptNumber") or "")
            payment.save()

            # A late success after expiry still pays the order
            if order.status == Order.STATUS_FAILED:
                _safe_order_move(transition_order, order, target=Order.STATUS_PENDING)
                order.refresh_from_db()
            _safe_order_move(mark_paid, order)

            logger.info(
                "M-Pesa payment completed",
                extra={
                    "checkout_request_id": checkout_request_id,
                    "receipt": payment.mpesa_receipt_number,
                    "order_id": str(order.id),
                },
            )
            return "completed"

        payment.status = PaymentRequest.STATUS_FAILED
        payment.save()
        if order.status == Order.STATUS_PENDING:
            _safe_order_move(mark_failed, order, reason=result_desc)

        logger.info(
            "M-Pesa payment failed",
            extra={
                "checkout_request_id": checkout_request_id,
                "result_code": result_code,
                "result_desc": result_desc,
            },
        )
        return "failed"


# =====================================================
# EXPIRY
# =====================================================

def expire_stale_requests(*, order: Order | None = None, now=None) -> int:
    """
    Expire PENDING requests older than MPESA["PAYMENT_TIMEOUT_SECONDS"].
    An order whose last pending request expired is marked failed.
    Returns the number of requests expired.
    """
    now = now or timezone.now()
    cutoff = now - PaymentRequest.timeout()

    qs = PaymentRequest.objects.filter(
        status=PaymentRequest.STATUS_PENDING, created_at__lte=cutoff
    )
    if order is not None:
        qs = qs.filter(order=order)

    expired = 0
    for payment_id in list(qs.values_list("id", flat=True)):
        with transaction.atomic():
            payment = (
                PaymentRequest.objects.select_for_update()
                .select_related("order")
                .filter(id=payment_id, status=PaymentRequest.STATUS_PENDING)
                .first()
            )
            if payment is None:
                continue

            payment.status = PaymentRequest.STATUS_EXPIRED
            payment.result_desc = "Payment timed out"
            payment.save(update_fields=["status", "result_desc", "updated_at"])
            expired += 1

            still_pending = PaymentRequest.objects.filter(
                order_id=payment.order_id, status=PaymentRequest.STATUS_PENDING
            ).exists()
            if not still_pending and payment.order.status == Order.STATUS_PENDING:
                _safe_order_move(mark_failed, payment.order, reason="timeout")

            logger.info(
                "Payment request expired",
                extra={
                    "payment_request_id": str(payment.id),
                    "order_id": str(payment.order_id),
                },
            )

    return expired
