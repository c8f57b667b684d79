"""Run navigation guards in front of page requests."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable
from urllib.parse import urlsplit

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from auth import AuthService
from guard import (
    AuthState,
    GuardSettings,
    IndexRedirectGuard,
    NavigationGuard,
    NavigationOrigin,
    NavigationTarget,
    RedirectTo,
    build_waiter,
    run_guards,
)


logger = logging.getLogger(__name__)

_GUARDED_METHODS = {"GET", "HEAD"}


class HttpNavigator:
    """Records the single continuation a guard chain issues for one request."""

    def __init__(self) -> None:
        self.redirect_to: RedirectTo | None = None

    def proceed(self) -> None:
        pass

    def redirect(self, decision: RedirectTo) -> None:
        self.redirect_to = decision

    def response(self) -> Response | None:
        if self.redirect_to is None:
            return None
        status_code = 303 if self.redirect_to.replace else 307
        return RedirectResponse(self.redirect_to.location, status_code=status_code)


def target_from_request(request: Request) -> NavigationTarget:
    query = dict(request.query_params)
    full_path = request.url.path
    if request.url.query:
        full_path = f"{full_path}?{request.url.query}"
    return NavigationTarget(path=request.url.path, full_path=full_path, query=query)


def origin_from_request(request: Request) -> NavigationOrigin | None:
    referer = request.headers.get("referer")
    if not referer:
        return None
    parts = urlsplit(referer)
    if not parts.path.startswith("/"):
        return None
    full_path = f"{parts.path}?{parts.query}" if parts.query else parts.path
    return NavigationOrigin(path=parts.path, full_path=full_path)


class NavigationGateMiddleware(BaseHTTPMiddleware):
    """
    Gate page navigations on the visitor's authentication.

    - API, docs and other exempt prefixes pass straight through.
    - Requests carrying ``<render header>: server`` are server render passes
      and always proceed.
    - Otherwise the access token (cookie, then bearer header) is resolved in
      the background while the guards wait on the request's AuthState.
    """

    def __init__(
        self,
        app: ASGIApp,
        auth_service: AuthService,
        settings: GuardSettings | None = None,
    ) -> None:
        super().__init__(app)
        self.auth_service = auth_service
        self.settings = settings or GuardSettings.from_env()
        self.waiter = build_waiter(self.settings)

    def _token(self, request: Request) -> str | None:
        token = request.cookies.get(self.settings.cookie_name)
        if token:
            return token
        authorization = request.headers.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
        return None

    def _client_side(self, request: Request) -> bool:
        return request.headers.get(self.settings.render_header, "").lower() != "server"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method not in _GUARDED_METHODS or self.settings.is_exempt(request.url.path):
            return await call_next(request)

        client_side = self._client_side(request)
        state = AuthState()
        bootstrap: asyncio.Task | None = None
        if client_side:
            bootstrap = asyncio.create_task(self.auth_service.bootstrap(state, self._token(request)))

        guards = [
            NavigationGuard(
                state,
                client_side=client_side,
                waiter=self.waiter,
                login_path=self.settings.login_path,
            ),
            IndexRedirectGuard(
                state,
                client_side=client_side,
                waiter=self.waiter,
                index_path=self.settings.login_path,
                home_path=self.settings.home_path,
            ),
        ]
        navigator = HttpNavigator()
        try:
            await run_guards(guards, origin_from_request(request), target_from_request(request), navigator)
        finally:
            if bootstrap is not None and not bootstrap.done():
                bootstrap.cancel()

        redirect = navigator.response()
        if redirect is not None:
            logger.info("Redirecting %s to %s", request.url.path, navigator.redirect_to.location)
            return redirect
        return await call_next(request)
