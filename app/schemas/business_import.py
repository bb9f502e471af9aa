"""
app/schemas/business_import.py

Response schemas for bulk business import endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.business_import import ImportPreview, ImportResult, ImportRowError


class ImportRowErrorResponse(BaseModel):
    """
    API response model for one row-level import error.
    """

    row: int = Field(..., ge=1)
    field: str
    message: str
    kind: str
    value: Any = None


class BusinessImportResultResponse(BaseModel):
    """
    API response model for an import or validate-only run.
    """

    success: int = Field(..., ge=0)
    created: int = Field(..., ge=0)
    updated: int = Field(..., ge=0)
    duplicates_skipped: int = Field(..., ge=0)
    errors: list[ImportRowErrorResponse] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ImportResult) -> "BusinessImportResultResponse":
        return cls(
            success=result.success,
            created=result.created,
            updated=result.updated,
            duplicates_skipped=result.duplicates_skipped,
            errors=[_error_response(error) for error in result.errors],
            warnings=list(result.warnings),
        )


class BusinessImportPreviewResponse(BaseModel):
    headers: list[str] = Field(default_factory=list)
    sample_rows: list[dict[str, str | None]] = Field(default_factory=list)
    total_rows: int = Field(..., ge=0)
    validation_errors: list[ImportRowErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_preview(cls, preview: ImportPreview) -> "BusinessImportPreviewResponse":
        return cls(
            headers=preview.headers,
            sample_rows=preview.sample_rows,
            total_rows=preview.total_rows,
            validation_errors=[_error_response(error) for error in preview.validation_errors],
        )


def _error_response(error: ImportRowError) -> ImportRowErrorResponse:
    return ImportRowErrorResponse(
        row=error.row,
        field=error.field,
        message=error.message,
        kind=error.kind,
        value=error.value,
    )
