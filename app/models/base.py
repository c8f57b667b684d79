"""SQLAlchemy declarative base and shared column mixins."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class with snake_case plural table names and a primary-key repr."""

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        name = "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in cls.__name__).lstrip("_")
        return f"{name}s"

    def __repr__(self) -> str:
        primary_keys = [column.key for column in self.__mapper__.primary_key]  # type: ignore[attr-defined]
        attrs = [f"{key}={getattr(self, key)!r}" for key in primary_keys]
        return f"<{self.__class__.__name__} {' '.join(attrs)}>"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
