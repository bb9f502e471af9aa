"""
app/repositories/business_query_builder.py

Read-side queries for business listings, each business joined with its best
matching catalog category.

The best match per business is chosen without window functions:

    candidates   every (business, category, rank) pair that matches at all
    best_rank    min(rank) per business
    winners      min(category id) among the candidates at that rank

Listings outer-join ``winners`` so businesses without any match still appear
with ``category = None``. Every filter value is a bound parameter.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, and_, case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.selectable import Subquery

from app.config import BusinessQuerySettings, get_business_query_settings
from app.domain.business_query import BusinessQueryFilter, BusinessStats, BusinessWithCategory, CityCount
from app.repositories.category_match import category_join_condition, category_match_rank
from db.models.business import Business, BusinessStatus
from db.models.category import Category

CATEGORY_FIELDS: tuple[str, ...] = ("id", "name", "slug", "description", "icon", "color")


class BusinessQueryError(RuntimeError):
    """
    Raised when a business read query fails in the database layer.
    """


def _not_permanently_closed():
    return or_(Business.permanently_closed.is_(False), Business.permanently_closed.is_(None))


def _category_winners() -> Subquery:
    candidates = (
        select(
            Business.place_id.label("place_id"),
            Category.id.label("category_id"),
            category_match_rank().label("match_rank"),
        )
        .select_from(Business)
        .join(Category, category_join_condition())
        .subquery("category_candidates")
    )
    best_rank = (
        select(
            candidates.c.place_id,
            func.min(candidates.c.match_rank).label("best_rank"),
        )
        .group_by(candidates.c.place_id)
        .subquery("category_best_rank")
    )
    return (
        select(
            candidates.c.place_id,
            func.min(candidates.c.category_id).label("category_id"),
        )
        .join(
            best_rank,
            and_(
                best_rank.c.place_id == candidates.c.place_id,
                best_rank.c.best_rank == candidates.c.match_rank,
            ),
        )
        .group_by(candidates.c.place_id)
        .subquery("category_winners")
    )


class BusinessQueryBuilder:
    """
    Builds and runs listing queries against one session.
    """

    def __init__(self, session: Session, settings: BusinessQuerySettings | None = None) -> None:
        self._session = session
        self._settings = settings or get_business_query_settings()

    # ------------------------------------------------------------------
    # Statement construction
    # ------------------------------------------------------------------

    def build(self, criteria: BusinessQueryFilter | None = None) -> Select:
        """
        Listing statement for ``criteria``; closed businesses are always excluded.
        """

        criteria = criteria or BusinessQueryFilter()
        stmt, winners = self._base_select()
        stmt = stmt.where(_not_permanently_closed())

        if criteria.category_id is not None:
            stmt = stmt.where(winners.c.category_id == criteria.category_id)
        if criteria.search:
            term = criteria.search.strip()
            if term:
                stmt = stmt.where(
                    or_(
                        Business.title.icontains(term, autoescape=True),
                        Business.description.icontains(term, autoescape=True),
                        Business.category_name.icontains(term, autoescape=True),
                    )
                )
        if criteria.city:
            stmt = stmt.where(Business.city == criteria.city)
        if criteria.featured:
            stmt = stmt.where(Business.featured.is_(True))

        stmt = stmt.order_by(
            Business.title,
            Business.address,
            Business.city,
            Business.featured.desc(),
            Business.created_at.desc().nulls_last(),
        )
        stmt = stmt.limit(self.clamp_limit(criteria.limit))
        if criteria.offset:
            stmt = stmt.offset(max(0, criteria.offset))
        return stmt

    def clamp_limit(self, limit: int | None) -> int:
        if limit is None or limit <= 0:
            return self._settings.default_limit
        return min(limit, self._settings.max_limit)

    def _base_select(self) -> tuple[Select, Subquery]:
        winners = _category_winners()
        stmt = (
            select(Business, Category)
            .outerjoin(winners, winners.c.place_id == Business.place_id)
            .outerjoin(Category, Category.id == winners.c.category_id)
        )
        return stmt, winners

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, criteria: BusinessQueryFilter | None = None) -> list[BusinessWithCategory]:
        return self._fetch(self.build(criteria), operation="list")

    def random(self, limit: int | None = None) -> list[BusinessWithCategory]:
        stmt, _ = self._base_select()
        stmt = (
            stmt.where(_not_permanently_closed())
            .order_by(func.random())
            .limit(self.clamp_limit(limit))
        )
        return self._fetch(stmt, operation="random")

    def get_by_slug(self, slug: str) -> BusinessWithCategory | None:
        stmt, _ = self._base_select()
        rows = self._fetch(stmt.where(Business.slug == slug).limit(1), operation="by_slug")
        return rows[0] if rows else None

    def stats(self) -> BusinessStats:
        stmt = select(
            func.count(),
            func.count(case((Business.status == BusinessStatus.APPROVED, 1))),
            func.count(case((Business.featured.is_(True), 1))),
        ).select_from(Business).where(_not_permanently_closed())
        try:
            total, active, featured = self._session.execute(stmt).one()
        except SQLAlchemyError as exc:
            raise BusinessQueryError(f"Business query failed operation=stats: {exc}") from exc
        return BusinessStats(total=int(total or 0), active=int(active or 0), featured=int(featured or 0))

    def cities_with_counts(self) -> list[CityCount]:
        count = func.count().label("business_count")
        stmt = (
            select(Business.city, count)
            .where(
                Business.city.is_not(None),
                Business.city != "",
                _not_permanently_closed(),
            )
            .group_by(Business.city)
            .order_by(count.desc(), Business.city)
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise BusinessQueryError(f"Business query failed operation=cities: {exc}") from exc
        return [CityCount(city=city, count=int(total)) for city, total in rows]

    def _fetch(self, stmt: Select, *, operation: str) -> list[BusinessWithCategory]:
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise BusinessQueryError(f"Business query failed operation={operation}: {exc}") from exc
        return [to_business_with_category(business, category) for business, category in rows]


def to_business_with_category(business: Business, category: Category | None) -> BusinessWithCategory:
    payload: dict[str, Any] = {
        column.key: getattr(business, column.key) for column in Business.__mapper__.column_attrs
    }
    payload["category"] = (
        {field: getattr(category, field) for field in CATEGORY_FIELDS} if category is not None else None
    )
    return payload
