from .payment import PaymentRequestSerializer, StkPushRequestSerializer, StkPushResponseSerializer

__all__ = ["PaymentRequestSerializer", "StkPushRequestSerializer", "StkPushResponseSerializer"]
