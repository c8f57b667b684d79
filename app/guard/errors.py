"""Exceptions raised while waiting on authentication state."""


class AuthInitTimeout(Exception):
    """Authentication did not finish initializing within the configured bound."""

    def __init__(self, attempts: int | None = None, timeout: float | None = None) -> None:
        self.attempts = attempts
        self.timeout = timeout
        if attempts is not None:
            message = f"auth not initialized after {attempts} re-checks"
        elif timeout is not None:
            message = f"auth not initialized within {timeout:.3f}s"
        else:
            message = "auth not initialized"
        super().__init__(message)
