"""Personal access tokens.

Tokens are handed out as ``<id>|<secret>``; only the SHA-256 of the secret is
stored.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.orm import Session

from models import PersonalAccessToken, User


logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def _digest(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def issue_token(session: Session, user: User, name: str, abilities: list[str]) -> str:
    secret = secrets.token_urlsafe(30)
    record = PersonalAccessToken(user_id=user.id, name=name, token=_digest(secret), abilities=abilities)
    session.add(record)
    session.flush()
    return f"{record.id}|{secret}"


def parse_token(plain: str) -> tuple[int, str] | None:
    token_id, sep, secret = plain.partition("|")
    if not sep or not secret or not token_id.isdigit():
        return None
    return int(token_id), secret


def find_token(session: Session, plain: str, ability: str = ACCESS) -> PersonalAccessToken | None:
    parsed = parse_token(plain)
    if parsed is None:
        return None
    token_id, secret = parsed
    record = session.get(PersonalAccessToken, token_id)
    if record is None or not hmac.compare_digest(record.token, _digest(secret)):
        return None
    if ability not in (record.abilities or []):
        logger.debug("Token %s lacks ability %s", token_id, ability)
        return None
    record.last_used_at = datetime.now(timezone.utc)
    return record


def revoke_token(session: Session, record: PersonalAccessToken) -> None:
    session.delete(record)


def revoke_all(session: Session, user: User) -> int:
    result = session.execute(delete(PersonalAccessToken).where(PersonalAccessToken.user_id == user.id))
    return result.rowcount or 0
