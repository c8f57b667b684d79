"""Database session dependencies."""

from collections.abc import Generator

from sqlalchemy.orm import Session

import models


def get_db() -> Generator[Session, None, None]:
    db = models.SessionLocal()
    try:
        yield db
    finally:
        db.close()
