"""Tests for the navigation guards."""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import parse_qs, urlsplit

import pytest

from guard import (
    PROCEED,
    AuthState,
    IndexRedirectGuard,
    NavigationGuard,
    NavigationOrigin,
    NavigationTarget,
    PollingWaiter,
    Proceed,
    RedirectTo,
    SignalWaiter,
    run_guards,
)


class RecordingNavigator:
    def __init__(self) -> None:
        self.calls: list[object] = []

    def proceed(self) -> None:
        self.calls.append(PROCEED)

    def redirect(self, decision: RedirectTo) -> None:
        self.calls.append(decision)


class FakeSleep:
    """Stands in for asyncio.sleep, initializing the state after ``ready_after`` calls."""

    def __init__(self, state: AuthState, ready_after: int | None, authenticated: bool = False) -> None:
        self.state = state
        self.ready_after = ready_after
        self.authenticated = authenticated
        self.intervals: list[float] = []

    async def __call__(self, interval: float) -> None:
        self.intervals.append(interval)
        if self.ready_after is not None and len(self.intervals) == self.ready_after:
            self.state.initialize(self.authenticated)


def _ready_state(authenticated: bool) -> AuthState:
    state = AuthState()
    state.initialize(authenticated)
    return state


def _target(path: str, full_path: str | None = None) -> NavigationTarget:
    return NavigationTarget(path=path, full_path=full_path or path)


def test_anonymous_navigation_redirects_with_full_path():
    navigator = RecordingNavigator()
    guard = NavigationGuard(_ready_state(False), navigator=navigator)

    decision = asyncio.run(guard.evaluate(None, _target("/dashboard", "/dashboard?tab=2")))

    assert decision == RedirectTo(path="/", query={"redirect": "/dashboard?tab=2"})
    assert navigator.calls == [decision]
    parsed = urlsplit(decision.location)
    assert parsed.path == "/"
    assert parse_qs(parsed.query) == {"redirect": ["/dashboard?tab=2"]}


@pytest.mark.parametrize("authenticated", [True, False])
def test_root_always_proceeds(authenticated):
    guard = NavigationGuard(_ready_state(authenticated))

    decision = asyncio.run(guard.evaluate(None, _target("/")))

    assert isinstance(decision, Proceed)


def test_authenticated_navigation_proceeds():
    navigator = RecordingNavigator()
    guard = NavigationGuard(_ready_state(True), navigator=navigator)

    decision = asyncio.run(guard.evaluate(_target("/"), _target("/settings")))

    assert decision == PROCEED
    assert navigator.calls == [PROCEED]


def test_server_side_pass_skips_waiting():
    state = AuthState()
    sleep = FakeSleep(state, ready_after=None)
    navigator = RecordingNavigator()
    guard = NavigationGuard(
        state,
        client_side=False,
        waiter=PollingWaiter(sleep=sleep),
        navigator=navigator,
    )

    decision = asyncio.run(guard.evaluate(None, _target("/dashboard")))

    assert decision == PROCEED
    assert sleep.intervals == []
    assert navigator.calls == []
    assert not state.is_initialized


def test_polls_until_initialized_then_decides_once():
    state = AuthState()
    sleep = FakeSleep(state, ready_after=3, authenticated=True)
    navigator = RecordingNavigator()
    guard = NavigationGuard(state, waiter=PollingWaiter(0.010, sleep=sleep), navigator=navigator)

    decision = asyncio.run(guard.evaluate(None, _target("/settings")))

    assert decision == PROCEED
    assert sleep.intervals == [0.010, 0.010, 0.010]
    assert navigator.calls == [PROCEED]


def test_polling_with_real_sleep_yields_to_other_tasks():
    async def scenario():
        state = AuthState()
        guard = NavigationGuard(state, waiter=PollingWaiter(0.001))
        pending = asyncio.create_task(guard.evaluate(None, _target("/reports")))
        await asyncio.sleep(0.005)
        assert not pending.done()
        state.initialize(False)
        return await pending

    decision = asyncio.run(scenario())

    assert decision == RedirectTo(path="/", query={"redirect": "/reports"})


def test_signal_waiter_decides_only_after_initialization():
    async def scenario():
        state = AuthState()
        navigator = RecordingNavigator()
        guard = NavigationGuard(state, waiter=SignalWaiter(), navigator=navigator)
        pending = asyncio.create_task(guard.evaluate(None, _target("/dashboard")))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not pending.done()
        assert navigator.calls == []
        state.initialize(False)
        decision = await pending
        return decision, navigator.calls

    decision, calls = asyncio.run(scenario())

    assert decision == RedirectTo(path="/", query={"redirect": "/dashboard"})
    assert calls == [decision]


def test_evaluate_is_idempotent():
    state = _ready_state(False)
    guard = NavigationGuard(state)
    origin = NavigationOrigin(path="/", full_path="/")
    target = _target("/list/products", "/list/products?page=2")

    first = asyncio.run(guard.evaluate(origin, target))
    second = asyncio.run(guard.evaluate(origin, target))

    assert first == second


def test_origin_is_not_inspected():
    guard = NavigationGuard(_ready_state(False))
    decision = asyncio.run(guard.evaluate(None, _target("/dashboard")))
    assert decision == RedirectTo(path="/", query={"redirect": "/dashboard"})


def test_polling_timeout_treats_visitor_as_anonymous(caplog):
    state = AuthState()
    sleep = FakeSleep(state, ready_after=None)
    guard = NavigationGuard(state, waiter=PollingWaiter(sleep=sleep, max_attempts=2))

    with caplog.at_level(logging.WARNING, logger="guard.navigation"):
        decision = asyncio.run(guard.evaluate(None, _target("/dashboard")))

    assert decision == RedirectTo(path="/", query={"redirect": "/dashboard"})
    assert len(sleep.intervals) == 2
    assert "anonymous" in caplog.text


def test_signal_timeout_treats_visitor_as_anonymous():
    guard = NavigationGuard(AuthState(), waiter=SignalWaiter(timeout=0.01))

    decision = asyncio.run(guard.evaluate(None, _target("/settings")))

    assert decision == RedirectTo(path="/", query={"redirect": "/settings"})


def test_failed_auth_state_redirects(caplog):
    state = AuthState()
    state.fail(RuntimeError("session lookup failed"))
    guard = NavigationGuard(state)

    with caplog.at_level(logging.WARNING, logger="guard.navigation"):
        decision = asyncio.run(guard.evaluate(None, _target("/dashboard")))

    assert isinstance(decision, RedirectTo)
    assert "session lookup failed" in caplog.text


def test_custom_login_path():
    guard = NavigationGuard(_ready_state(False), login_path="/login")

    assert asyncio.run(guard.evaluate(None, _target("/login"))) == PROCEED
    assert asyncio.run(guard.evaluate(None, _target("/"))) == RedirectTo(
        path="/login", query={"redirect": "/"}
    )


def test_index_redirect_sends_authenticated_users_home():
    guard = IndexRedirectGuard(_ready_state(True), home_path="/list/users")

    decision = asyncio.run(guard.evaluate(None, _target("/")))

    assert decision == RedirectTo(path="/list/users", replace=True)
    assert decision.location == "/list/users"


def test_index_redirect_leaves_anonymous_users_on_index():
    guard = IndexRedirectGuard(_ready_state(False))
    assert asyncio.run(guard.evaluate(None, _target("/"))) == PROCEED


def test_index_redirect_ignores_other_paths_without_waiting():
    guard = IndexRedirectGuard(AuthState(), waiter=SignalWaiter(timeout=5))
    assert asyncio.run(guard.evaluate(None, _target("/dashboard"))) == PROCEED


def test_run_guards_issues_first_redirect_once():
    state = _ready_state(True)
    navigator = RecordingNavigator()
    guards = [NavigationGuard(state), IndexRedirectGuard(state)]

    decision = asyncio.run(run_guards(guards, None, _target("/"), navigator))

    assert decision == RedirectTo(path="/list/users", replace=True)
    assert navigator.calls == [decision]


def test_run_guards_proceeds_when_all_proceed():
    state = _ready_state(True)
    navigator = RecordingNavigator()
    guards = [NavigationGuard(state), IndexRedirectGuard(state)]

    decision = asyncio.run(run_guards(guards, None, _target("/dashboard"), navigator))

    assert decision == PROCEED
    assert navigator.calls == [PROCEED]


def test_run_guards_ignores_navigators_held_by_guards():
    state = _ready_state(False)
    navigator = RecordingNavigator()
    guards = [
        NavigationGuard(state, navigator=navigator),
        IndexRedirectGuard(state, navigator=navigator),
    ]

    decision = asyncio.run(run_guards(guards, None, _target("/dashboard"), navigator))

    assert decision == RedirectTo(path="/", query={"redirect": "/dashboard"})
    assert navigator.calls == [decision]


def test_check_does_not_issue_continuation():
    navigator = RecordingNavigator()
    guard = NavigationGuard(_ready_state(False), navigator=navigator)

    decision = asyncio.run(guard.check(_target("/settings")))

    assert decision == RedirectTo(path="/", query={"redirect": "/settings"})
    assert navigator.calls == []


def test_guard_base_requires_decide():
    from guard.navigation import _AuthGuard

    with pytest.raises(TypeError):
        _AuthGuard(_ready_state(True))
