from .exceptions import (
    InvalidPhoneNumber,
    MpesaConfigurationError,
    MpesaError,
    OrderNotPayable,
    PaymentError,
)
from .mpesa import (
    build_password,
    format_phone_number,
    get_access_token,
    initiate_stk_push,
)
from .processing import (
    expire_stale_requests,
    handle_callback,
    latest_payment_for,
    start_stk_push,
    whole_shillings,
)

__all__ = [
    "InvalidPhoneNumber",
    "MpesaConfigurationError",
    "MpesaError",
    "OrderNotPayable",
    "PaymentError",
    "build_password",
    "format_phone_number",
    "get_access_token",
    "initiate_stk_push",
    "expire_stale_requests",
    "handle_callback",
    "latest_payment_for",
    "start_stk_push",
    "whole_shillings",
]
