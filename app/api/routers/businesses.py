"""
app/api/routers/businesses.py

Public business listing endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_business_search_service
from app.domain.business_query import BusinessQueryFilter
from app.schemas.businesses import BusinessResponse, BusinessStatsResponse, CityCountResponse
from app.services.business_search_service import BusinessSearchService
from db.session import get_db

router = APIRouter(tags=["businesses"])


@router.get("/businesses", response_model=list[BusinessResponse])
def list_businesses(
    category_id: int | None = Query(default=None, ge=1),
    search: str | None = Query(default=None, max_length=200),
    city: str | None = Query(default=None, max_length=120),
    featured: bool | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> list[dict]:
    criteria = BusinessQueryFilter(
        category_id=category_id,
        search=search,
        city=city,
        featured=featured,
        limit=limit,
        offset=offset,
    )
    return search_service.get_businesses(db, criteria)


@router.get("/businesses/featured", response_model=list[BusinessResponse])
def list_featured_businesses(
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> list[dict]:
    return search_service.get_featured_businesses(db, limit)


@router.get("/businesses/random", response_model=list[BusinessResponse])
def list_random_businesses(
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> list[dict]:
    return search_service.get_random_businesses(db, limit)


@router.get("/businesses/stats", response_model=BusinessStatsResponse)
def business_stats(
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> BusinessStatsResponse:
    stats = search_service.get_business_stats(db)
    return BusinessStatsResponse(total=stats.total, active=stats.active, featured=stats.featured)


@router.get("/businesses/slug/{slug}", response_model=BusinessResponse)
def get_business_by_slug(
    slug: str,
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> dict:
    business = search_service.get_business_by_slug(db, slug)
    if business is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Business not found.",
        )
    return business


@router.get("/cities", response_model=list[CityCountResponse])
def list_cities(
    db: Session = Depends(get_db),
    search_service: BusinessSearchService = Depends(get_business_search_service),
) -> list[CityCountResponse]:
    return [
        CityCountResponse(city=entry.city, count=entry.count)
        for entry in search_service.get_cities(db)
    ]
