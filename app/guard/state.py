"""Authentication readiness state observed by navigation guards."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable


logger = logging.getLogger(__name__)

ReadyCallback = Callable[["AuthState"], None]


class AuthState:
    """Readiness and authentication flags for one client session.

    ``is_initialized`` goes from false to true exactly once and never reverts.
    ``is_authenticated`` may change at any point after that. Waiters can either
    poll the flags or await :meth:`wait_initialized`, which is notified once.
    """

    def __init__(self) -> None:
        self._initialized = False
        self._authenticated = False
        self._error: BaseException | None = None
        self._ready = asyncio.Event()
        self._callbacks: list[ReadyCallback] = []

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def failed(self) -> bool:
        return self._error is not None

    def initialize(self, authenticated: bool) -> None:
        self._authenticated = bool(authenticated)
        if self._initialized:
            return
        self._initialized = True
        self._notify()

    def fail(self, error: BaseException) -> None:
        """Finish initialization in the error state: unauthenticated, with ``error`` kept."""
        self._error = error
        self._authenticated = False
        if self._initialized:
            return
        self._initialized = True
        self._notify()

    def set_authenticated(self, value: bool) -> None:
        self._authenticated = bool(value)

    async def wait_initialized(self) -> None:
        if self._initialized:
            return
        await self._ready.wait()

    def subscribe(self, callback: ReadyCallback) -> None:
        if self._initialized:
            callback(self)
            return
        self._callbacks.append(callback)

    def _notify(self) -> None:
        self._ready.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("Auth ready callback failed")

    def __repr__(self) -> str:
        return (
            f"<AuthState initialized={self._initialized} "
            f"authenticated={self._authenticated} failed={self.failed}>"
        )
