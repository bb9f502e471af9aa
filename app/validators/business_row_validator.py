"""
app/validators/business_row_validator.py

Batch-level validation for parsed business rows.

Every rule runs for every row so the caller receives the complete error list
in one pass. Errors are ordered by row, then by the rule order below.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from typing import Any

from app.domain.business_import import ImportRowError, RawRow

REQUIRED_FIELDS: tuple[str, ...] = ("title", "placeid")

JSON_FIELDS: tuple[str, ...] = (
    "categories",
    "reviewsdistribution",
    "reviews",
    "imageurls",
    "openinghours",
    "amenities",
)

NUMERIC_FIELDS: tuple[str, ...] = ("lat", "lng", "totalscore", "reviewscount")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^https?://.+")
PHONE_SEPARATORS = re.compile(r"[\s\-().]")
MIN_PHONE_LENGTH = 7


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_strict_json(value: str) -> Any:
    """
    json.loads without the NaN / Infinity extensions.

    Raises ValueError for malformed input and RecursionError for nesting
    deeper than the interpreter stack allows.
    """

    return json.loads(value, parse_constant=_reject_constant)


def is_valid_json(value: str) -> bool:
    try:
        load_strict_json(value)
    except (ValueError, RecursionError):
        return False
    return True


class BusinessRowValidator:
    """
    Validates structural and semantic constraints of raw business rows.
    """

    def validate(self, rows: Sequence[RawRow]) -> list[ImportRowError]:
        """
        Return every validation error for the batch, row numbers 1-based.
        """

        errors: list[ImportRowError] = []
        seen_place_ids: set[str] = set()

        for row_number, row in enumerate(rows, start=1):
            self._check_required(row, row_number, errors)
            self._check_batch_duplicate(row, row_number, seen_place_ids, errors)
            self._check_email(row, row_number, errors)
            self._check_phone(row, row_number, errors)
            self._check_website(row, row_number, errors)
            self._check_json_fields(row, row_number, errors)
            self._check_numeric_fields(row, row_number, errors)

        return errors

    def _check_required(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        for field in REQUIRED_FIELDS:
            value = row.get(field)
            if self._is_blank(value):
                errors.append(
                    ImportRowError(
                        row=row_number,
                        field=field,
                        value=value,
                        message=f"Required field '{field}' is missing or empty",
                    )
                )

    def _check_batch_duplicate(
        self,
        row: RawRow,
        row_number: int,
        seen_place_ids: set[str],
        errors: list[ImportRowError],
    ) -> None:
        place_id = row.get("placeid")
        if self._is_blank(place_id):
            return
        if place_id in seen_place_ids:
            errors.append(
                ImportRowError(
                    row=row_number,
                    field="placeid",
                    value=place_id,
                    message="Duplicate placeid found in CSV",
                )
            )
        seen_place_ids.add(place_id)

    def _check_email(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        email = row.get("email")
        if self._is_blank(email):
            return
        if not EMAIL_PATTERN.match(email):
            errors.append(
                ImportRowError(
                    row=row_number,
                    field="email",
                    value=email,
                    message="Invalid email format",
                )
            )

    def _check_phone(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        phone = row.get("phone")
        if self._is_blank(phone):
            return
        if len(PHONE_SEPARATORS.sub("", phone)) < MIN_PHONE_LENGTH:
            errors.append(
                ImportRowError(
                    row=row_number,
                    field="phone",
                    value=phone,
                    message="Phone number appears to be too short",
                )
            )

    def _check_website(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        website = row.get("website")
        if self._is_blank(website):
            return
        if not URL_PATTERN.match(website):
            errors.append(
                ImportRowError(
                    row=row_number,
                    field="website",
                    value=website,
                    message="Invalid website URL format",
                )
            )

    def _check_json_fields(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        for field in JSON_FIELDS:
            value = row.get(field)
            if not isinstance(value, str) or not value:
                continue
            if not is_valid_json(value):
                errors.append(
                    ImportRowError(
                        row=row_number,
                        field=field,
                        value=value,
                        message="Invalid JSON format",
                    )
                )

    def _check_numeric_fields(
        self,
        row: RawRow,
        row_number: int,
        errors: list[ImportRowError],
    ) -> None:
        for field in NUMERIC_FIELDS:
            value = row.get(field)
            if self._is_blank(value):
                continue
            if not self.is_numeric(value):
                errors.append(
                    ImportRowError(
                        row=row_number,
                        field=field,
                        value=value,
                        message="Must be a valid number",
                    )
                )

    @staticmethod
    def is_numeric(value: Any) -> bool:
        raw = str(value).strip()
        if "_" in raw:
            return False
        try:
            parsed = float(raw)
        except ValueError:
            return False
        return math.isfinite(parsed)

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""
