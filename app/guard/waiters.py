"""Strategies for waiting until authentication has initialized.

Both strategies yield to the event loop while waiting; neither blocks the
calling thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Protocol

from guard.errors import AuthInitTimeout
from guard.state import AuthState

if TYPE_CHECKING:
    from guard.settings import GuardSettings


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_POLL_INTERVAL = 0.010


class InitWaiter(Protocol):
    async def wait(self, state: AuthState) -> int:
        """Return once ``state`` is initialized; the result is the number of re-checks."""
        ...


class PollingWaiter:
    """Re-check the readiness flag on a fixed interval."""

    def __init__(
        self,
        interval: float = DEFAULT_POLL_INTERVAL,
        *,
        sleep: Sleep = asyncio.sleep,
        max_attempts: int | None = None,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be non-negative")
        if max_attempts is not None and max_attempts < 0:
            raise ValueError("max_attempts must be non-negative")
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    async def wait(self, state: AuthState) -> int:
        rechecks = 0
        while not state.is_initialized:
            if self.max_attempts is not None and rechecks >= self.max_attempts:
                raise AuthInitTimeout(attempts=rechecks)
            await self._sleep(self.interval)
            rechecks += 1
        if rechecks:
            logger.debug("Auth initialized after %d re-checks", rechecks)
        return rechecks


class SignalWaiter:
    """Await the one-shot readiness notification published by :class:`AuthState`."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    async def wait(self, state: AuthState) -> int:
        if state.is_initialized:
            return 0
        if self.timeout is None:
            await state.wait_initialized()
            return 0
        try:
            await asyncio.wait_for(state.wait_initialized(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise AuthInitTimeout(timeout=self.timeout) from exc
        return 0


def build_waiter(settings: "GuardSettings") -> InitWaiter:
    if settings.wait_strategy == "poll":
        return PollingWaiter(settings.poll_interval, max_attempts=settings.max_polls)
    return SignalWaiter(timeout=settings.init_timeout)
