"""
app/services/business_search_service.py

Read facade over the query builder. Featured, random and stats listings are
served through the business cache; everything else goes straight to the
database. Query failures are logged and turned into empty results so a
broken listing never takes a page down.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from app.cache.business_cache import (
    STATS_KEY,
    BusinessCache,
    featured_businesses_key,
    random_businesses_key,
)
from app.config import (
    BusinessCacheSettings,
    BusinessQuerySettings,
    get_business_cache_settings,
    get_business_query_settings,
)
from app.domain.business_query import BusinessQueryFilter, BusinessStats, BusinessWithCategory, CityCount
from app.repositories.business_query_builder import BusinessQueryBuilder, BusinessQueryError

logger = logging.getLogger(__name__)

QueryBuilderFactory = Callable[[Session], BusinessQueryBuilder]


class BusinessSearchService:
    """
    Cached and uncached business listings for the public API.
    """

    def __init__(
        self,
        cache: BusinessCache,
        *,
        cache_settings: BusinessCacheSettings | None = None,
        query_settings: BusinessQuerySettings | None = None,
        builder_factory: QueryBuilderFactory | None = None,
    ) -> None:
        self._cache = cache
        self._cache_settings = cache_settings or get_business_cache_settings()
        self._query_settings = query_settings or get_business_query_settings()
        self._builder_factory = builder_factory or (
            lambda session: BusinessQueryBuilder(session, self._query_settings)
        )

    # ------------------------------------------------------------------
    # Cached reads
    # ------------------------------------------------------------------

    def get_featured_businesses(self, db: Session, limit: int | None = None) -> list[BusinessWithCategory]:
        limit = self._effective_limit(limit, self._query_settings.featured_default_limit)
        try:
            return self._cache.get_or_load(
                featured_businesses_key(limit),
                self._cache_settings.featured_ttl_ms,
                lambda: self._builder_factory(db).execute(
                    BusinessQueryFilter(featured=True, limit=limit)
                ),
            )
        except BusinessQueryError:
            logger.exception("Featured businesses query failed limit=%s", limit)
            return []

    def get_random_businesses(self, db: Session, limit: int | None = None) -> list[BusinessWithCategory]:
        limit = self._effective_limit(limit, self._query_settings.random_default_limit)
        try:
            return self._cache.get_or_load(
                random_businesses_key(limit),
                self._cache_settings.random_ttl_ms,
                lambda: self._builder_factory(db).random(limit),
            )
        except BusinessQueryError:
            logger.exception("Random businesses query failed limit=%s", limit)
            return []

    def get_business_stats(self, db: Session) -> BusinessStats:
        try:
            return self._cache.get_or_load(
                STATS_KEY,
                self._cache_settings.stats_ttl_ms,
                lambda: self._builder_factory(db).stats(),
            )
        except BusinessQueryError:
            logger.exception("Business stats query failed")
            return BusinessStats()

    # ------------------------------------------------------------------
    # Uncached reads
    # ------------------------------------------------------------------

    def get_businesses(
        self,
        db: Session,
        criteria: BusinessQueryFilter | None = None,
    ) -> list[BusinessWithCategory]:
        try:
            return self._builder_factory(db).execute(criteria)
        except BusinessQueryError:
            logger.exception("Business listing query failed criteria=%r", criteria)
            return []

    def get_business_by_slug(self, db: Session, slug: str) -> BusinessWithCategory | None:
        try:
            return self._builder_factory(db).get_by_slug(slug)
        except BusinessQueryError:
            logger.exception("Business lookup failed slug=%s", slug)
            return None

    def get_cities(self, db: Session) -> list[CityCount]:
        try:
            return self._builder_factory(db).cities_with_counts()
        except BusinessQueryError:
            logger.exception("City listing query failed")
            return []

    def _effective_limit(self, limit: int | None, default: int) -> int:
        if limit is None or limit <= 0:
            return default
        return min(limit, self._query_settings.max_limit)
