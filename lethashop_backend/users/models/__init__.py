from .user import User, UserManager, role_for_email

__all__ = [
    "User",
    "UserManager",
    "role_for_email",
]
