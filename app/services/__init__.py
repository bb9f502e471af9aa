"""
app/services package marker.
"""

from app.services.business_admin_service import BusinessAdminService
from app.services.business_import_service import (
    BusinessImportService,
    get_business_import_service,
)
from app.services.business_search_service import BusinessSearchService
from app.services.slug_resolver import SlugResolver, slugify

__all__ = [
    "BusinessAdminService",
    "BusinessImportService",
    "get_business_import_service",
    "BusinessSearchService",
    "SlugResolver",
    "slugify",
]
