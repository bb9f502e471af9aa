"""
db/models/business.py

Business listing model: one directory entry, keyed by its third-party place id.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONDocument, TimestampMixin


class BusinessStatus:
    APPROVED = "approved"
    PENDING = "pending"


class Business(Base, TimestampMixin):
    """
    Canonical business record.

    place_id is the external identifier (Google place id for bulk imports) and
    doubles as the primary key; slug is the unique public URL identifier.
    category_name is free text and is reconciled against the category catalog
    at query time rather than through a foreign key.
    """

    __tablename__ = "businesses"

    place_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_name: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Free-text category as supplied by the source",
    )

    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_unformatted: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(Text, nullable=True)
    street: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    postal_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str | None] = mapped_column(Text, nullable=True)
    country_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    total_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    reviews_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    permanently_closed: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    temporarily_closed: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)

    categories: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)
    reviews_distribution: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)
    reviews: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)
    image_urls: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)
    opening_hours: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)
    amenities: Mapped[Any | None] = mapped_column(JSONDocument, nullable=True)

    seo_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    seo_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=BusinessStatus.APPROVED,
        comment="approved, pending",
    )
    submitted_by: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Origin of the record, e.g. csv-import",
    )

    __table_args__ = (
        Index("ix_businesses_city", "city"),
        Index("ix_businesses_category_name", "category_name"),
        Index("ix_businesses_featured", "featured"),
    )
