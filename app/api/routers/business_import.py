"""
app/api/routers/business_import.py

Bulk business import HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_business_cache, get_csv_upload, read_upload_buffer
from app.cache.business_cache import BusinessCache
from app.domain.business_import import ImportOptions
from app.parsers.business_csv_parser import BusinessCSVFormatError
from app.repositories.business_repository import BusinessRepository
from app.schemas.business_import import BusinessImportPreviewResponse, BusinessImportResultResponse
from app.services.business_import_service import BusinessImportService, get_business_import_service
from db.session import get_db

router = APIRouter(prefix="/admin/import-csv", tags=["business-import"])


@router.post("/preview", response_model=BusinessImportPreviewResponse)
def preview_import(
    file: UploadFile = Depends(get_csv_upload),
    import_service: BusinessImportService = Depends(get_business_import_service),
) -> BusinessImportPreviewResponse:
    """
    Show headers, the first rows and their validation errors without importing.
    """

    buffer = read_upload_buffer(file)
    try:
        preview = import_service.preview(buffer)
    except BusinessCSVFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BusinessImportPreviewResponse.from_preview(preview)


@router.post("/validate", response_model=BusinessImportResultResponse)
def validate_import(
    file: UploadFile = Depends(get_csv_upload),
    db: Session = Depends(get_db),
    import_service: BusinessImportService = Depends(get_business_import_service),
) -> BusinessImportResultResponse:
    """
    Validate every row of the upload; nothing is written.
    """

    buffer = read_upload_buffer(file)
    try:
        result = import_service.import_csv(
            buffer,
            store=BusinessRepository(db),
            options=import_service.default_options(validate_only=True),
        )
    except BusinessCSVFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BusinessImportResultResponse.from_result(result)


@router.post("", response_model=BusinessImportResultResponse)
def import_businesses(
    file: UploadFile = Depends(get_csv_upload),
    update_duplicates: bool | None = Query(default=None, description="Overwrite businesses whose placeid already exists"),
    skip_duplicates: bool | None = Query(default=None, description="Silently skip businesses whose placeid already exists"),
    batch_size: int | None = Query(default=None, ge=1, le=1000, description="Rows per commit"),
    db: Session = Depends(get_db),
    cache: BusinessCache = Depends(get_business_cache),
    import_service: BusinessImportService = Depends(get_business_import_service),
) -> BusinessImportResultResponse:
    """
    Import every valid row of the upload.
    """

    defaults = import_service.default_options()
    options = ImportOptions(
        update_duplicates=defaults.update_duplicates if update_duplicates is None else update_duplicates,
        skip_duplicates=defaults.skip_duplicates if skip_duplicates is None else skip_duplicates,
        batch_size=defaults.batch_size if batch_size is None else batch_size,
    )

    buffer = read_upload_buffer(file)
    try:
        result = import_service.import_csv(
            buffer,
            store=BusinessRepository(db),
            options=options,
            cache=cache,
        )
    except BusinessCSVFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BusinessImportResultResponse.from_result(result)
