from .exceptions import (
    InvalidSessionError,
    UsersServiceConfigurationError,
    UsersServiceError,
)
from .users_service import (
    delete_session,
    exchange_code_for_session_token,
    get_current_user,
    get_oauth_redirect_url,
)

__all__ = [
    "UsersServiceError",
    "UsersServiceConfigurationError",
    "InvalidSessionError",
    "get_oauth_redirect_url",
    "exchange_code_for_session_token",
    "get_current_user",
    "delete_session",
]
