"""Account authentication and per-session auth state resolution."""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from auth import tokens
from auth.errors import InactiveAccount, InvalidCredentials, InvalidToken, RegistrationConflict
from auth.passwords import hash_password, verify_password
from auth.schemas import RegisterRequest, looks_like_email
from guard.state import AuthState
import models
from models import User


logger = logging.getLogger(__name__)


class AuthService:
    """Login, registration and token lifecycle on top of the accounts tables."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory

    @property
    def session_factory(self) -> Callable[[], Session]:
        # Falls back to whatever ``models.SessionLocal`` is bound to at call time.
        return self._session_factory or models.SessionLocal

    def authenticate(self, session: Session, username: str, password: str) -> User:
        column = User.email if looks_like_email(username) else User.username
        lookup = username.lower() if column is User.email else username
        user = session.execute(select(User).where(column == lookup)).scalar_one_or_none()
        if user is None or not verify_password(password, user.password):
            logger.info("Rejected login for %s", username)
            raise InvalidCredentials()
        if not user.active:
            raise InactiveAccount()
        return user

    def issue_pair(self, session: Session, user: User) -> tuple[str, str]:
        access = tokens.issue_token(session, user, "auth_token", [tokens.ACCESS])
        refresh = tokens.issue_token(session, user, "refresh_token", [tokens.REFRESH])
        return access, refresh

    def login(self, session: Session, username: str, password: str) -> tuple[User, str, str]:
        user = self.authenticate(session, username, password)
        access, refresh = self.issue_pair(session, user)
        session.commit()
        logger.info("User %s logged in", user.username)
        return user, access, refresh

    def register(self, session: Session, payload: RegisterRequest) -> tuple[User, str, str]:
        clashes = session.execute(
            select(User).where(
                or_(
                    User.email == payload.email,
                    User.username == payload.username,
                    User.whatsapp == payload.whatsapp,
                )
            )
        ).scalars().all()
        if clashes:
            errors: dict[str, list[str]] = {}
            for existing in clashes:
                for field in ("email", "username", "whatsapp"):
                    if getattr(existing, field) == getattr(payload, field):
                        errors.setdefault(field, []).append(f"The {field} has already been taken.")
            raise RegistrationConflict(details=errors)

        user = User(
            name=payload.name,
            email=payload.email,
            username=payload.username,
            whatsapp=payload.whatsapp,
            password=hash_password(payload.password),
            role=payload.role or "user",
        )
        session.add(user)
        session.flush()
        access, refresh = self.issue_pair(session, user)
        session.commit()
        logger.info("Registered user %s", user.username)
        return user, access, refresh

    def refresh(self, session: Session, refresh_token: str) -> tuple[User, str, str]:
        if tokens.parse_token(refresh_token) is None:
            raise InvalidToken("Invalid refresh token format")
        record = tokens.find_token(session, refresh_token, ability=tokens.REFRESH)
        if record is None or record.user is None:
            raise InvalidToken("Invalid refresh token")
        user = record.user
        tokens.revoke_token(session, record)
        access, refresh = self.issue_pair(session, user)
        session.commit()
        return user, access, refresh

    def logout(self, session: Session, user: User) -> int:
        revoked = tokens.revoke_all(session, user)
        session.commit()
        logger.info("User %s logged out, %d tokens revoked", user.username, revoked)
        return revoked

    def resolve_user(self, session: Session, token: str | None) -> User | None:
        if not token:
            return None
        record = tokens.find_token(session, token, ability=tokens.ACCESS)
        if record is None or record.user is None or not record.user.active:
            return None
        return record.user

    def _lookup_authenticated(self, token: str) -> bool:
        with self.session_factory() as session:
            user = self.resolve_user(session, token)
            session.commit()
            return user is not None

    async def bootstrap(self, state: AuthState, token: str | None) -> AuthState:
        """Initialize ``state`` from ``token`` without blocking the event loop."""
        if not token:
            state.initialize(authenticated=False)
            return state
        try:
            authenticated = await run_in_threadpool(self._lookup_authenticated, token)
        except Exception as exc:
            logger.exception("Auth bootstrap failed")
            state.fail(exc)
            return state
        state.initialize(authenticated=authenticated)
        return state
