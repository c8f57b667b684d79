"""Navigation guards deciding whether a route transition may proceed."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Protocol

from guard.errors import AuthInitTimeout
from guard.models import PROCEED, GuardDecision, NavigationOrigin, NavigationTarget, RedirectTo
from guard.state import AuthState
from guard.waiters import InitWaiter, SignalWaiter


logger = logging.getLogger(__name__)


class Navigator(Protocol):
    """Continuation primitive of the router running the guard."""

    def proceed(self) -> None:
        ...

    def redirect(self, decision: RedirectTo) -> None:
        ...


def issue(navigator: Navigator | None, decision: GuardDecision) -> GuardDecision:
    if navigator is None:
        return decision
    if isinstance(decision, RedirectTo):
        navigator.redirect(decision)
    else:
        navigator.proceed()
    return decision


class _AuthGuard(ABC):
    def __init__(
        self,
        auth: AuthState,
        *,
        client_side: bool = True,
        waiter: InitWaiter | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self.auth = auth
        self.client_side = client_side
        self.waiter = waiter or SignalWaiter()
        self.navigator = navigator

    async def _authenticated(self, target: NavigationTarget) -> bool:
        """Wait for initialization, then report the current authentication flag."""
        try:
            await self.waiter.wait(self.auth)
        except AuthInitTimeout as exc:
            logger.warning("Treating navigation to %s as anonymous: %s", target.full_path, exc)
            return False
        if self.auth.failed:
            logger.warning(
                "Auth initialization failed, treating navigation to %s as anonymous: %s",
                target.full_path,
                self.auth.error,
            )
            return False
        return self.auth.is_authenticated

    @abstractmethod
    async def decide(self, target: NavigationTarget) -> GuardDecision:
        """Decide for a client-side navigation once auth may be consulted."""

    async def check(self, target: NavigationTarget) -> GuardDecision:
        """Return the decision without issuing it through the navigator."""
        if not self.client_side:
            return PROCEED
        decision = await self.decide(target)
        logger.debug("%s: %s -> %s", type(self).__name__, target.full_path, decision)
        return decision

    async def evaluate(
        self,
        origin: NavigationOrigin | None,
        target: NavigationTarget,
    ) -> GuardDecision:
        if not self.client_side:
            return PROCEED
        return issue(self.navigator, await self.check(target))


class NavigationGuard(_AuthGuard):
    """Send anonymous visitors to the login path, keeping where they were headed.

    On the server the guard proceeds straight away: auth state does not exist
    there. On the client it waits for :class:`AuthState` to initialize, then
    redirects unauthenticated navigations to anything but ``login_path`` to
    ``login_path?redirect=<full path>``.
    """

    def __init__(
        self,
        auth: AuthState,
        *,
        client_side: bool = True,
        waiter: InitWaiter | None = None,
        navigator: Navigator | None = None,
        login_path: str = "/",
    ) -> None:
        super().__init__(auth, client_side=client_side, waiter=waiter, navigator=navigator)
        self.login_path = login_path

    async def decide(self, target: NavigationTarget) -> GuardDecision:
        authenticated = await self._authenticated(target)
        if not authenticated and target.path != self.login_path:
            return RedirectTo(path=self.login_path, query={"redirect": target.full_path})
        return PROCEED


class IndexRedirectGuard(_AuthGuard):
    """Move signed-in users off the index page onto the landing page."""

    def __init__(
        self,
        auth: AuthState,
        *,
        client_side: bool = True,
        waiter: InitWaiter | None = None,
        navigator: Navigator | None = None,
        index_path: str = "/",
        home_path: str = "/list/users",
    ) -> None:
        super().__init__(auth, client_side=client_side, waiter=waiter, navigator=navigator)
        self.index_path = index_path
        self.home_path = home_path

    async def decide(self, target: NavigationTarget) -> GuardDecision:
        if target.path != self.index_path:
            return PROCEED
        if await self._authenticated(target):
            return RedirectTo(path=self.home_path, replace=True)
        return PROCEED


async def run_guards(
    guards: Iterable[_AuthGuard],
    origin: NavigationOrigin | None,
    target: NavigationTarget,
    navigator: Navigator | None = None,
) -> GuardDecision:
    """Evaluate ``guards`` in order; the first redirect wins.

    Only ``navigator`` receives the continuation, once; navigators held by the
    individual guards are not used.
    """
    for guard in guards:
        decision = await guard.check(target)
        if isinstance(decision, RedirectTo):
            return issue(navigator, decision)
    return issue(navigator, PROCEED)
