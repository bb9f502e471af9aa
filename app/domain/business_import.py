"""
app/domain/business_import.py

Domain models used by the bulk business import flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

RawRow = dict[str, "str | None"]


class ImportErrorKind:
    VALIDATION = "validation"
    TRANSFORMATION = "transformation"
    PERSISTENCE = "persistence"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ImportRowError:
    """
    One row-level import error.

    row is the 1-based position of the record in the parsed input (header
    excluded). field is the offending column, or "general" for failures that
    are not tied to one cell.
    """

    row: int
    field: str
    message: str
    value: Any = None
    kind: str = ImportErrorKind.VALIDATION


@dataclass(frozen=True)
class ImportOptions:
    """
    Duplicate-handling policy and chunking for one import run.
    """

    update_duplicates: bool = False
    skip_duplicates: bool = True
    validate_only: bool = False
    batch_size: int = 50


@dataclass
class ImportResult:
    """
    End-of-run import summary. success counts created plus updated rows.
    """

    success: int = 0
    created: int = 0
    updated: int = 0
    duplicates_skipped: int = 0
    errors: list[ImportRowError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportPreview:
    """
    Header list, sample rows and sample validation for a not-yet-imported file.
    """

    headers: list[str]
    sample_rows: list[RawRow]
    total_rows: int
    validation_errors: list[ImportRowError] = field(default_factory=list)
