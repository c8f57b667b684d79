"""Environment-driven configuration for navigation guards."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


DEFAULT_EXEMPT_PREFIXES = ("/api", "/docs", "/redoc", "/openapi.json", "/up")


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def _prefixes(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_EXEMPT_PREFIXES
    return tuple(prefix.strip() for prefix in raw.split(",") if prefix.strip())


@dataclass(frozen=True)
class GuardSettings:
    wait_strategy: str = "signal"
    poll_interval: float = 0.010
    max_polls: int | None = None
    init_timeout: float | None = None
    login_path: str = "/"
    home_path: str = "/list/users"
    exempt_prefixes: tuple[str, ...] = field(default=DEFAULT_EXEMPT_PREFIXES)
    render_header: str = "x-render-pass"
    cookie_name: str = "auth_token"

    @classmethod
    def from_env(cls) -> "GuardSettings":
        strategy = os.getenv("GUARD_WAIT_STRATEGY", "signal").strip().lower()
        if strategy not in {"signal", "poll"}:
            raise ValueError(f"Unknown GUARD_WAIT_STRATEGY {strategy!r}")

        interval_ms = int(os.getenv("GUARD_POLL_INTERVAL_MS", "10"))
        if interval_ms < 0:
            raise ValueError("GUARD_POLL_INTERVAL_MS must be non-negative")
        timeout_ms = _optional_int("GUARD_INIT_TIMEOUT_MS")

        return cls(
            wait_strategy=strategy,
            poll_interval=interval_ms / 1000,
            max_polls=_optional_int("GUARD_MAX_POLLS"),
            init_timeout=timeout_ms / 1000 if timeout_ms is not None else None,
            login_path=os.getenv("GUARD_LOGIN_PATH", "/"),
            home_path=os.getenv("GUARD_HOME_PATH", "/list/users"),
            exempt_prefixes=_prefixes(os.getenv("GUARD_EXEMPT_PREFIXES")),
            render_header=os.getenv("GUARD_RENDER_HEADER", "x-render-pass").lower(),
            cookie_name=os.getenv("AUTH_COOKIE_NAME", "auth_token"),
        )

    def is_exempt(self, path: str) -> bool:
        for prefix in self.exempt_prefixes:
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                return True
        return False
