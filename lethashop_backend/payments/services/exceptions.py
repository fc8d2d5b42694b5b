# payments/services/exceptions.py

"""
M-Pesa domain exceptions.
Views translate them into {"error": {"code", "message"}} responses.
"""


class PaymentError(Exception):
    """
    Base class for payment failures.
    """


class MpesaError(PaymentError):
    """
    Safaricom was unreachable or rejected the request.
    """


class MpesaConfigurationError(MpesaError):
    """
    Credentials / shortcode / callback URL are missing.
    """


class InvalidPhoneNumber(PaymentError):
    """
    Phone number cannot be normalised to 2547XXXXXXXX / 2541XXXXXXXX.
    """


class OrderNotPayable(PaymentError):
    """
    Order is not in a status that accepts a payment (e.g. already paid).
    """
