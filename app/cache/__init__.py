"""
app/cache package marker.
"""

from app.cache.business_cache import (
    BUSINESS_CACHE_PREFIXES,
    BusinessCache,
    featured_businesses_key,
    random_businesses_key,
)

__all__ = [
    "BUSINESS_CACHE_PREFIXES",
    "BusinessCache",
    "featured_businesses_key",
    "random_businesses_key",
]
