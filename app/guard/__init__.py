"""Navigation guards gated on authentication readiness."""

from .errors import AuthInitTimeout
from .models import PROCEED, GuardDecision, NavigationOrigin, NavigationTarget, Proceed, RedirectTo
from .navigation import IndexRedirectGuard, NavigationGuard, Navigator, run_guards
from .settings import GuardSettings
from .state import AuthState
from .waiters import PollingWaiter, SignalWaiter, build_waiter

__all__ = [
    "AuthInitTimeout",
    "AuthState",
    "GuardDecision",
    "GuardSettings",
    "IndexRedirectGuard",
    "NavigationGuard",
    "NavigationOrigin",
    "NavigationTarget",
    "Navigator",
    "PROCEED",
    "PollingWaiter",
    "Proceed",
    "RedirectTo",
    "SignalWaiter",
    "build_waiter",
    "run_guards",
]
