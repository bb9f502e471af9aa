"""
tests/support.py

Test doubles and builders shared across test modules: an in-memory
BusinessStore fake, a savepoint-capable SQLite engine and raw-row builders.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401 registers all ORM models on Base.metadata
from app.repositories.business_repository import BusinessPersistenceError
from db.base import Base
from db.models.business import Business

# ---------------------------------------------------------------------------
# In-memory BusinessStore
# ---------------------------------------------------------------------------


class FakeBusinessStore:
    """
    Dict-backed BusinessStore with transactional commit/rollback semantics.

    ``fail_create_for`` makes create() reject the given place ids;
    ``fail_commit_calls`` makes the Nth commit() call (1-based) fail.
    """

    def __init__(
        self,
        existing: list[Mapping[str, Any]] | None = None,
        *,
        fail_create_for: set[str] | None = None,
        fail_commit_calls: set[int] | None = None,
    ) -> None:
        self.records: dict[str, dict[str, Any]] = {}
        for values in existing or []:
            self.records[values["place_id"]] = dict(values)
        self.fail_create_for = fail_create_for or set()
        self.fail_commit_calls = fail_commit_calls or set()
        self.commit_calls = 0
        self.rollback_calls = 0
        self._journal: list[tuple[str, dict[str, Any] | None]] = []

    def get_by_place_id(self, place_id: str) -> Business | None:
        values = self.records.get(place_id)
        return Business(**values) if values is not None else None

    def create(self, values: Mapping[str, Any]) -> Business:
        place_id = values["place_id"]
        if place_id in self.fail_create_for:
            raise BusinessPersistenceError(f"simulated failure for {place_id}")
        self._journal.append((place_id, None))
        self.records[place_id] = dict(values)
        return Business(**values)

    def update(self, place_id: str, values: Mapping[str, Any]) -> Business | None:
        previous = self.records.get(place_id)
        if previous is None:
            return None
        self._journal.append((place_id, dict(previous)))
        merged = {**previous, **{k: v for k, v in values.items() if k != "place_id"}}
        self.records[place_id] = merged
        return Business(**merged)

    def slug_exists(self, slug: str, exclude_place_id: str | None = None) -> bool:
        return any(
            record.get("slug") == slug and place_id != exclude_place_id
            for place_id, record in self.records.items()
        )

    def commit(self) -> None:
        self.commit_calls += 1
        if self.commit_calls in self.fail_commit_calls:
            raise BusinessPersistenceError("simulated commit failure")
        self._journal.clear()

    def rollback(self) -> None:
        self.rollback_calls += 1
        for place_id, previous in reversed(self._journal):
            if previous is None:
                self.records.pop(place_id, None)
            else:
                self.records[place_id] = previous
        self._journal.clear()


# ---------------------------------------------------------------------------
# SQLite session
# ---------------------------------------------------------------------------


def build_sqlite_engine() -> Engine:
    """
    In-memory SQLite engine on which SAVEPOINT / begin_nested() work.
    """

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def make_row(place_id: str, title: str | None = "Test Business", **overrides: str | None) -> dict[str, str | None]:
    """
    Raw parsed CSV row with sensible defaults for every validated column.
    """

    row: dict[str, str | None] = {
        "placeid": place_id,
        "title": title,
        "categoryname": "Cafe",
        "city": "Sydney",
        "address": "1 George St",
        "website": "https://example.com",
        "email": "hello@example.com",
        "phone": "(02) 9999 1234",
    }
    row.update(overrides)
    return row
