# orders/services/exceptions.py

"""
Domain exceptions raised by the orders services.
Views translate them into {"error": {"code", "message"}} responses.
"""


class OrderError(Exception):
    """
    Base class for all checkout / lifecycle failures.
    """


class EmptyCartError(OrderError):
    """
    Raised when checkout is attempted with nothing to buy.
    """


class ProductUnavailableError(OrderError):
    """
    Raised when a line points at a missing or unpublished product.
    """


class InsufficientStockError(OrderError):
    """
    Raised when requested quantity exceeds inventory_quantity.
    """

    def __init__(self, *, product, requested: int, available: int):
        self.product = product
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product.name}. "
            f"Requested: {requested}, Available: {available}"
        )


class InvalidStatusTransition(OrderError):
    """
    Raised when an order is moved to a status its lifecycle forbids.
    """

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from '{current}' to '{target}'")
