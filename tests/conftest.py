"""
tests/conftest.py

Shared fixtures for the business directory test suite.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from db.session import build_session_factory
from tests.support import FakeBusinessStore, build_sqlite_engine


@pytest.fixture()
def fake_store() -> FakeBusinessStore:
    return FakeBusinessStore()


@pytest.fixture()
def sqlite_engine() -> Iterator[Engine]:
    engine = build_sqlite_engine()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(sqlite_engine: Engine) -> Iterator[Session]:
    session = build_session_factory(sqlite_engine)()
    try:
        yield session
    finally:
        session.close()
