"""
app/repositories/business_repository.py

Persistence layer for business records.

Writes run inside a SAVEPOINT so a rejected row (unique violation, bad
value) rolls back alone and leaves the surrounding transaction usable for
the rest of the import chunk.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.business import Business


class BusinessPersistenceError(RuntimeError):
    """
    Raised when the store rejects a business write.
    """


class BusinessStore(Protocol):
    """
    The narrow persistence surface the import and slug logic depend on.
    """

    def get_by_place_id(self, place_id: str) -> Business | None: ...

    def create(self, values: Mapping[str, Any]) -> Business: ...

    def update(self, place_id: str, values: Mapping[str, Any]) -> Business | None: ...

    def slug_exists(self, slug: str, exclude_place_id: str | None = None) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


_IMMUTABLE_ON_UPDATE = {"place_id", "created_at"}


class BusinessRepository:
    """
    SQLAlchemy-backed BusinessStore plus the admin mutations.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_place_id(self, place_id: str) -> Business | None:
        try:
            return self._session.get(Business, place_id)
        except SQLAlchemyError as exc:
            raise BusinessPersistenceError(_describe(exc)) from exc

    def slug_exists(self, slug: str, exclude_place_id: str | None = None) -> bool:
        condition = Business.slug == slug
        if exclude_place_id:
            condition = condition & (Business.place_id != exclude_place_id)
        try:
            return bool(self._session.scalar(select(exists().where(condition))))
        except SQLAlchemyError as exc:
            raise BusinessPersistenceError(_describe(exc)) from exc

    def create(self, values: Mapping[str, Any]) -> Business:
        business = Business(**dict(values))
        try:
            with self._session.begin_nested():
                self._session.add(business)
                self._session.flush()
        except SQLAlchemyError as exc:
            raise BusinessPersistenceError(_describe(exc)) from exc
        return business

    def update(self, place_id: str, values: Mapping[str, Any]) -> Business | None:
        business = self.get_by_place_id(place_id)
        if business is None:
            return None
        try:
            with self._session.begin_nested():
                for key, value in values.items():
                    if key in _IMMUTABLE_ON_UPDATE:
                        continue
                    setattr(business, key, value)
                self._session.flush()
        except SQLAlchemyError as exc:
            self._session.expire(business)
            raise BusinessPersistenceError(_describe(exc)) from exc
        return business

    def set_featured(self, place_id: str, featured: bool) -> Business | None:
        return self.update(place_id, {"featured": featured})

    def delete(self, place_id: str) -> bool:
        try:
            with self._session.begin_nested():
                result = self._session.execute(
                    delete(Business).where(Business.place_id == place_id)
                )
        except SQLAlchemyError as exc:
            raise BusinessPersistenceError(_describe(exc)) from exc
        return bool(result.rowcount)

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            raise BusinessPersistenceError(_describe(exc)) from exc

    def rollback(self) -> None:
        self._session.rollback()


def _describe(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    return str(original) if original is not None else str(exc)
