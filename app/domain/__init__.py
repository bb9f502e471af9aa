"""
app/domain package marker.
"""

from app.domain.business_import import (
    ImportErrorKind,
    ImportOptions,
    ImportPreview,
    ImportResult,
    ImportRowError,
    RawRow,
)
from app.domain.business_query import BusinessQueryFilter, BusinessStats, BusinessWithCategory, CityCount

__all__ = [
    "BusinessQueryFilter",
    "BusinessStats",
    "BusinessWithCategory",
    "CityCount",
    "ImportErrorKind",
    "ImportOptions",
    "ImportPreview",
    "ImportResult",
    "ImportRowError",
    "RawRow",
]
