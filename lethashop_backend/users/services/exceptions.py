# users/services/exceptions.py

"""
USERS SERVICE ERRORS

Domain errors raised by the external users-service client.
"""


class UsersServiceError(Exception):
    """Base exception for users-service failures (network, HTTP, payload)."""


class UsersServiceConfigurationError(UsersServiceError):
    """Raised when USERS_SERVICE API_URL / API_KEY are not configured."""


class InvalidSessionError(UsersServiceError):
    """Raised when a session token is rejected by the users service."""
