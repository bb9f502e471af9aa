"""
app/domain/business_query.py

Query criteria and result shapes for business listings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

BusinessWithCategory = dict[str, Any]


@dataclass(frozen=True)
class BusinessQueryFilter:
    """
    Caller-supplied listing criteria. None means "no restriction".
    """

    category_id: int | None = None
    search: str | None = None
    city: str | None = None
    featured: bool | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True)
class BusinessStats:
    total: int = 0
    active: int = 0
    featured: int = 0


@dataclass(frozen=True)
class CityCount:
    city: str
    count: int
