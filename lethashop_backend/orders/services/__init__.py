from .checkout import place_order
from .exceptions import (
    EmptyCartError,
    InsufficientStockError,
    InvalidStatusTransition,
    OrderError,
    ProductUnavailableError,
)
from .lifecycle import (
    ALLOWED_TRANSITIONS,
    can_transition,
    mark_failed,
    mark_paid,
    transition_order,
)
from .pricing import compute_totals, shipping_for

__all__ = [
    "place_order",
    "EmptyCartError",
    "InsufficientStockError",
    "InvalidStatusTransition",
    "OrderError",
    "ProductUnavailableError",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "mark_failed",
    "mark_paid",
    "transition_order",
    "compute_totals",
    "shipping_for",
]
