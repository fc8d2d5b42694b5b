# cart/services/exceptions.py


class CartError(Exception):
    """
    Base class for cart failures surfaced to the storefront.
    """


class ProductUnavailableError(CartError):
    """
    Raised when a product is missing or unpublished.
    """
