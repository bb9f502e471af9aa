"""
app/services/business_import_service.py

Service layer for the bulk business import workflow.

Pipeline per upload:

    parse -> validate whole batch -> for each valid row, in file order:
        existence check -> duplicate policy -> transform -> slug -> write

Row failures of any kind are recorded in the ImportResult and never abort
the batch. Rows are written one at a time (each in its own savepoint) and
committed in chunks of ``batch_size``; a failed chunk commit moves that
chunk's rows into the error list and the import carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

from app.cache.business_cache import BusinessCache
from app.config import get_business_import_settings
from app.domain.business_import import (
    ImportErrorKind,
    ImportOptions,
    ImportPreview,
    ImportResult,
    ImportRowError,
    RawRow,
)
from app.mappers.business_record_mapper import BusinessRecordMapper, RecordTransformationError
from app.parsers.business_csv_parser import BusinessCSVParser
from app.repositories.business_repository import BusinessPersistenceError, BusinessStore
from app.services.slug_resolver import SlugResolver
from app.validators.business_row_validator import BusinessRowValidator

logger = logging.getLogger(__name__)

_CREATED = "created"
_UPDATED = "updated"

CONFLICT_MESSAGE = "Business with this placeid already exists"


class BusinessImportService:
    """
    Coordinates parsing, validation, transformation and persistence of rows.
    """

    def __init__(
        self,
        *,
        preview_rows: int = 10,
        log_row_errors: bool = True,
        parser: BusinessCSVParser | None = None,
        validator: BusinessRowValidator | None = None,
        mapper: BusinessRecordMapper | None = None,
    ) -> None:
        self._preview_rows = max(1, preview_rows)
        self._log_row_errors = log_row_errors
        self._parser = parser or BusinessCSVParser()
        self._validator = validator or BusinessRowValidator()
        self._mapper = mapper or BusinessRecordMapper()

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def preview(self, buffer: bytes, *, max_rows: int | None = None) -> ImportPreview:
        """
        Parse the upload and validate only its first ``max_rows`` rows.
        """

        rows = self._parser.parse(buffer)
        limit = max(1, max_rows or self._preview_rows)
        sample = rows[:limit]
        headers = list(rows[0].keys()) if rows else []
        return ImportPreview(
            headers=headers,
            sample_rows=sample,
            total_rows=len(rows),
            validation_errors=self._validator.validate(sample),
        )

    def import_csv(
        self,
        buffer: bytes,
        *,
        store: BusinessStore,
        options: ImportOptions | None = None,
        cache: BusinessCache | None = None,
    ) -> ImportResult:
        """
        Parse ``buffer`` and import its rows. BusinessCSVFormatError propagates.
        """

        rows = self._parser.parse(buffer)
        logger.info("Business CSV parsed rows=%s bytes=%s", len(rows), len(buffer))
        return self.import_rows(rows, store=store, options=options, cache=cache)

    def import_rows(
        self,
        rows: Sequence[RawRow],
        *,
        store: BusinessStore,
        options: ImportOptions | None = None,
        cache: BusinessCache | None = None,
    ) -> ImportResult:
        options = options or ImportOptions()
        result = ImportResult()

        validation_errors = self._validator.validate(rows)
        invalid_rows = {error.row for error in validation_errors}

        if options.validate_only:
            result.errors.extend(validation_errors)
            result.success = len(rows) - len(invalid_rows)
            logger.info(
                "Business import validated rows=%s valid=%s errors=%s",
                len(rows),
                result.success,
                len(validation_errors),
            )
            return result

        for error in validation_errors:
            self._record_error(result, error)
        if validation_errors:
            result.warnings.append(
                f"Found {len(validation_errors)} validation errors. Processing valid rows only."
            )

        slugs = SlugResolver(store)
        batch_size = max(1, options.batch_size)
        chunk: list[tuple[int, str]] = []
        chunk_index = 0

        for row_number, raw_row in enumerate(rows, start=1):
            if row_number in invalid_rows:
                continue
            outcome = self._import_row(
                raw_row=raw_row,
                row_number=row_number,
                store=store,
                slugs=slugs,
                options=options,
                result=result,
            )
            if outcome is not None:
                chunk.append((row_number, outcome))
            if len(chunk) >= batch_size:
                chunk_index += 1
                self._commit_chunk(store=store, chunk=chunk, chunk_index=chunk_index, result=result)
                chunk = []

        if chunk:
            chunk_index += 1
            self._commit_chunk(store=store, chunk=chunk, chunk_index=chunk_index, result=result)

        result.success = result.created + result.updated
        if cache is not None and result.success > 0:
            cache.invalidate_business_caches()

        logger.info(
            "Business import complete rows=%s created=%s updated=%s skipped=%s errors=%s",
            len(rows),
            result.created,
            result.updated,
            result.duplicates_skipped,
            len(result.errors),
        )
        return result

    def default_options(self, *, validate_only: bool = False) -> ImportOptions:
        settings = get_business_import_settings()
        return ImportOptions(
            update_duplicates=settings.update_duplicates,
            skip_duplicates=settings.skip_duplicates,
            validate_only=validate_only,
            batch_size=settings.batch_size,
        )

    # ------------------------------------------------------------------
    # Row processing
    # ------------------------------------------------------------------

    def _import_row(
        self,
        *,
        raw_row: RawRow,
        row_number: int,
        store: BusinessStore,
        slugs: SlugResolver,
        options: ImportOptions,
        result: ImportResult,
    ) -> str | None:
        """
        Apply one row and return its outcome, or None when nothing was written.
        """

        place_id = raw_row.get("placeid") or ""
        try:
            existing = store.get_by_place_id(place_id)
            if existing is not None:
                if options.update_duplicates:
                    values = self._mapper.to_business_values(
                        raw_row, row_number=row_number, warnings=result.warnings
                    )
                    values["slug"] = slugs.resolve(
                        values["title"],
                        place_id=place_id,
                        exclude_place_id=place_id,
                    )
                    store.update(place_id, values)
                    result.updated += 1
                    return _UPDATED
                if options.skip_duplicates:
                    result.duplicates_skipped += 1
                    return None
                self._record_error(
                    result,
                    ImportRowError(
                        row=row_number,
                        field="placeid",
                        value=place_id,
                        message=CONFLICT_MESSAGE,
                        kind=ImportErrorKind.CONFLICT,
                    ),
                )
                return None

            values = self._mapper.to_business_values(
                raw_row, row_number=row_number, warnings=result.warnings
            )
            values["slug"] = slugs.resolve(values["title"], place_id=place_id)
            store.create(values)
            result.created += 1
            return _CREATED
        except RecordTransformationError as exc:
            self._record_error(
                result,
                ImportRowError(
                    row=row_number,
                    field="general",
                    message=f"Failed to transform row: {exc}",
                    kind=ImportErrorKind.TRANSFORMATION,
                ),
            )
        except BusinessPersistenceError as exc:
            self._record_error(
                result,
                ImportRowError(
                    row=row_number,
                    field="general",
                    message=f"Failed to save business: {exc}",
                    kind=ImportErrorKind.PERSISTENCE,
                ),
            )
        return None

    def _commit_chunk(
        self,
        *,
        store: BusinessStore,
        chunk: list[tuple[int, str]],
        chunk_index: int,
        result: ImportResult,
    ) -> None:
        try:
            store.commit()
        except BusinessPersistenceError as exc:
            store.rollback()
            logger.error(
                "Business import chunk commit failed chunk=%s rows=%s: %s",
                chunk_index,
                len(chunk),
                exc,
            )
            for row_number, outcome in chunk:
                if outcome == _CREATED:
                    result.created -= 1
                elif outcome == _UPDATED:
                    result.updated -= 1
                self._record_error(
                    result,
                    ImportRowError(
                        row=row_number,
                        field="general",
                        message=f"Failed to save business: {exc}",
                        kind=ImportErrorKind.PERSISTENCE,
                    ),
                )
            return
        logger.info("Business import chunk committed chunk=%s rows=%s", chunk_index, len(chunk))

    def _record_error(self, result: ImportResult, error: ImportRowError) -> None:
        if self._log_row_errors:
            logger.warning(
                "Business import error row=%s field=%s kind=%s message=%s value=%r",
                error.row,
                error.field,
                error.kind,
                error.message,
                error.value,
            )
        result.errors.append(error)


@lru_cache(maxsize=1)
def get_business_import_service() -> BusinessImportService:
    settings = get_business_import_settings()
    return BusinessImportService(
        preview_rows=settings.preview_rows,
        log_row_errors=settings.log_row_errors,
        mapper=BusinessRecordMapper(default_country_code=settings.default_country_code),
    )
