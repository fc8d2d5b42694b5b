from .payment_request import PaymentRequest

__all__ = ["PaymentRequest"]
