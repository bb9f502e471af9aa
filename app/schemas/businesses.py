"""
app/schemas/businesses.py

Response schemas for public business listings and admin mutations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CategorySummaryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    color: str | None = None


class BusinessResponse(BaseModel):
    """
    API response model for one business with its resolved catalog category.
    """

    place_id: str
    title: str
    slug: str
    subtitle: str | None = None
    description: str | None = None
    category_name: str | None = None
    website: str | None = None
    phone: str | None = None
    phone_unformatted: str | None = None
    email: str | None = None
    address: str | None = None
    neighborhood: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    state: str | None = None
    country_code: str | None = None
    lat: float | None = None
    lng: float | None = None
    total_score: float | None = None
    reviews_count: int | None = None
    featured: bool = False
    permanently_closed: bool | None = None
    temporarily_closed: bool | None = None
    image_url: str | None = None
    logo: str | None = None
    categories: Any = None
    reviews_distribution: Any = None
    reviews: Any = None
    image_urls: Any = None
    opening_hours: Any = None
    amenities: Any = None
    seo_title: str | None = None
    seo_description: str | None = None
    status: str | None = None
    submitted_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: CategorySummaryResponse | None = None


class BusinessStatsResponse(BaseModel):
    total: int = Field(..., ge=0)
    active: int = Field(..., ge=0)
    featured: int = Field(..., ge=0)


class CityCountResponse(BaseModel):
    city: str
    count: int = Field(..., ge=0)


class FeaturedUpdateRequest(BaseModel):
    featured: bool


class BusinessMutationResponse(BaseModel):
    place_id: str
    featured: bool | None = None
    deleted: bool = False
