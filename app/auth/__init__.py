"""Account authentication."""

from .errors import AuthError, InactiveAccount, InvalidCredentials, InvalidToken, RegistrationConflict
from .service import AuthService

__all__ = [
    "AuthError",
    "AuthService",
    "InactiveAccount",
    "InvalidCredentials",
    "InvalidToken",
    "RegistrationConflict",
]
