"""SQLAlchemy models and session utilities."""

from .base import Base
from .session import SessionLocal, engine
from .tables import PersonalAccessToken, User

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "PersonalAccessToken",
    "User",
]
