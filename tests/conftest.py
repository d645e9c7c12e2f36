from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

os.environ.setdefault("LINALG_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LINALG_REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("LINALG_PRACTICE_KEY_SECRET", "test-secret")
os.environ.setdefault("LINALG_APP_ENV", "test")

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from linalg_practice import models  # noqa: F401
from linalg_practice.db.base import Base


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    with session_factory() as session:
        yield session
