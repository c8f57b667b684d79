"""Authentication failures surfaced to API clients."""

from __future__ import annotations

from typing import Any


class AuthError(Exception):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Authentication required"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    message = "The provided credentials are incorrect."


class InactiveAccount(AuthError):
    status_code = 403
    code = "ACCOUNT_INACTIVE"
    message = "Your account is not active. Please contact an administrator."


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    message = "Invalid token"


class RegistrationConflict(AuthError):
    status_code = 422
    code = "VALIDATION_FAILED"
    message = "Validation failed"
