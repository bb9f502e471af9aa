"""
app/services/slug_resolver.py

Derives URL-safe business slugs that are unique among persisted records.
"""

from __future__ import annotations

import re

from app.repositories.business_repository import BusinessStore

MAX_BASE_SLUG_LENGTH = 50
PLACE_ID_SUFFIX_LENGTH = 8
FALLBACK_SLUG = "business"

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(title: str, *, max_length: int = MAX_BASE_SLUG_LENGTH) -> str:
    """
    Lowercase, drop everything outside [a-z0-9 -], hyphenate whitespace.
    """

    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug[:max_length].strip("-")


class SlugResolver:
    """
    Builds candidate slugs and checks the store until one is free.
    """

    def __init__(self, store: BusinessStore) -> None:
        self._store = store

    @staticmethod
    def base_slug(title: str, place_id: str | None = None) -> str:
        """
        Candidate slug for a title; CSV imports get the place id tail appended.
        """

        slug = slugify(title) or FALLBACK_SLUG
        if place_id:
            slug = f"{slug}-{place_id[-PLACE_ID_SUFFIX_LENGTH:]}"
        return slug

    def ensure_unique(self, base_slug: str, *, exclude_place_id: str | None = None) -> str:
        """
        Return base_slug, or base_slug-N for the first free N >= 1.

        ``exclude_place_id`` lets a record keep (collide with) its own slug.
        """

        slug = base_slug
        counter = 1
        while self._store.slug_exists(slug, exclude_place_id):
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def resolve(
        self,
        title: str,
        *,
        place_id: str | None = None,
        exclude_place_id: str | None = None,
    ) -> str:
        return self.ensure_unique(
            self.base_slug(title, place_id),
            exclude_place_id=exclude_place_id,
        )
