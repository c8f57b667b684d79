"""Pytest fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest


@pytest.fixture()
def database():
    from models import Base, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(database):
    from models import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    from auth.passwords import hash_password
    from models import User

    def _make_user(username: str = "ana", password: str = "secret-pass", **overrides):
        fields = {
            "name": username.title(),
            "email": f"{username}@example.com",
            "username": username,
            "whatsapp": None,
            # Low iteration count keeps the suite fast; verify reads it from the hash.
            "password": hash_password(password, iterations=1_000),
            "active": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user
