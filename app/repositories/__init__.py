"""
app/repositories package marker.
"""

from app.repositories.business_query_builder import BusinessQueryBuilder, BusinessQueryError
from app.repositories.business_repository import (
    BusinessPersistenceError,
    BusinessRepository,
    BusinessStore,
)

__all__ = [
    "BusinessPersistenceError",
    "BusinessQueryBuilder",
    "BusinessQueryError",
    "BusinessRepository",
    "BusinessStore",
]
