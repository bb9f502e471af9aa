"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and app-owned services.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Request, UploadFile, status

from app.cache.business_cache import BusinessCache
from app.config import get_business_import_settings
from app.services.business_admin_service import BusinessAdminService
from app.services.business_search_service import BusinessSearchService

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def read_upload_buffer(file: UploadFile, *, max_bytes: int | None = None) -> bytes:
    """
    Read the whole upload into memory, rejecting files over the size limit.
    """

    limit = max_bytes if max_bytes is not None else get_business_import_settings().max_upload_bytes
    try:
        file.file.seek(0)
        buffer = file.file.read(limit + 1)
    finally:
        file.file.close()

    if len(buffer) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"CSV file exceeds the {limit} byte upload limit.",
        )
    return buffer


def get_business_cache(request: Request) -> BusinessCache:
    cache = getattr(request.app.state, "business_cache", None)
    if cache is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Business cache is not initialised.",
        )
    return cache


def get_business_search_service(request: Request) -> BusinessSearchService:
    return BusinessSearchService(get_business_cache(request))


def get_business_admin_service(request: Request) -> BusinessAdminService:
    return BusinessAdminService(get_business_cache(request))
