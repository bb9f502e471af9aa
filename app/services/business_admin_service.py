"""
app/services/business_admin_service.py

Admin mutations on single businesses. Every successful mutation drops the
cached listings so the next public read reflects it.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.cache.business_cache import BusinessCache
from app.repositories.business_repository import BusinessPersistenceError, BusinessRepository
from db.models.business import Business

logger = logging.getLogger(__name__)


class BusinessAdminService:
    def __init__(self, cache: BusinessCache) -> None:
        self._cache = cache

    def set_featured(self, db: Session, place_id: str, featured: bool) -> Business | None:
        """
        Toggle the featured flag; None when the business does not exist.

        BusinessPersistenceError propagates after the session is rolled back.
        """

        repository = BusinessRepository(db)
        try:
            business = repository.set_featured(place_id, featured)
            if business is None:
                return None
            repository.commit()
        except BusinessPersistenceError:
            repository.rollback()
            raise
        self._cache.invalidate_business_caches()
        logger.info("Business featured flag set place_id=%s featured=%s", place_id, featured)
        return business

    def delete_business(self, db: Session, place_id: str) -> bool:
        repository = BusinessRepository(db)
        try:
            deleted = repository.delete(place_id)
            if not deleted:
                return False
            repository.commit()
        except BusinessPersistenceError:
            repository.rollback()
            raise
        self._cache.invalidate_business_caches()
        logger.info("Business deleted place_id=%s", place_id)
        return True
