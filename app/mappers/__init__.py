"""
app/mappers package marker.
"""

from app.mappers.business_record_mapper import (
    BusinessRecordMapper,
    RecordTransformationError,
    build_seo_description,
    build_seo_title,
)

__all__ = [
    "BusinessRecordMapper",
    "RecordTransformationError",
    "build_seo_description",
    "build_seo_title",
]
