from .callback import MpesaCallbackView
from .status import PaymentStatusView
from .stkpush import StkPushView

__all__ = ["MpesaCallbackView", "PaymentStatusView", "StkPushView"]
