"""
app/schemas package marker.
"""

from app.schemas.business_import import (
    BusinessImportPreviewResponse,
    BusinessImportResultResponse,
    ImportRowErrorResponse,
)
from app.schemas.businesses import (
    BusinessMutationResponse,
    BusinessResponse,
    BusinessStatsResponse,
    CategorySummaryResponse,
    CityCountResponse,
    FeaturedUpdateRequest,
)

__all__ = [
    "BusinessImportPreviewResponse",
    "BusinessImportResultResponse",
    "BusinessMutationResponse",
    "BusinessResponse",
    "BusinessStatsResponse",
    "CategorySummaryResponse",
    "CityCountResponse",
    "FeaturedUpdateRequest",
    "ImportRowErrorResponse",
]
