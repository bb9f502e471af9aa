"""
app/mappers/business_record_mapper.py

Maps one validated raw CSV row onto the canonical Business column set.

The mapper is deliberately lenient with messy third-party data: JSON
sub-documents that fail to parse are dropped with a warning instead of
failing the row. Only a missing place id or title raises.
"""

from __future__ import annotations

import logging
from typing import Any

from app.domain.business_import import RawRow
from app.validators.business_row_validator import BusinessRowValidator, load_strict_json
from db.models.business import BusinessStatus

logger = logging.getLogger(__name__)

CSV_IMPORT_SUBMITTER = "csv-import"
DEFAULT_COUNTRY_CODE = "AU"

SEO_DESCRIPTION_MAX = 160
SEO_FALLBACK_DESCRIPTION_MAX = 150

# CSV column -> Business attribute, for plain text columns.
TEXT_COLUMNS: dict[str, str] = {
    "subtitle": "subtitle",
    "description": "description",
    "website": "website",
    "phone": "phone",
    "phoneunformatted": "phone_unformatted",
    "email": "email",
    "address": "address",
    "neighborhood": "neighborhood",
    "street": "street",
    "city": "city",
    "postalcode": "postal_code",
    "state": "state",
    "imageurl": "image_url",
    "logo": "logo",
}

FLOAT_COLUMNS: dict[str, str] = {
    "lat": "lat",
    "lng": "lng",
    "totalscore": "total_score",
}

BOOLEAN_COLUMNS: dict[str, str] = {
    "featured": "featured",
    "permanentlyclosed": "permanently_closed",
    "temporarilyclosed": "temporarily_closed",
}

JSON_COLUMNS: dict[str, str] = {
    "categories": "categories",
    "reviewsdistribution": "reviews_distribution",
    "reviews": "reviews",
    "imageurls": "image_urls",
    "openinghours": "opening_hours",
    "amenities": "amenities",
}

_JSON_NULL_LITERALS = {"undefined", "null"}


class RecordTransformationError(ValueError):
    """
    Raised when a row cannot be shaped into a business record.
    """


class BusinessRecordMapper:
    """
    Converts raw import rows into Business attribute dictionaries.
    """

    def __init__(self, *, default_country_code: str = DEFAULT_COUNTRY_CODE) -> None:
        self._default_country_code = default_country_code

    def to_business_values(
        self,
        raw_row: RawRow,
        *,
        row_number: int | None = None,
        warnings: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Build the attribute dictionary for one business.

        Warnings about dropped JSON fields are appended to ``warnings`` when a
        list is supplied, and always logged.
        """

        if not isinstance(raw_row, dict):
            raise RecordTransformationError("Invalid CSV row data")

        place_id = self._text(raw_row.get("placeid"))
        title = self._text(raw_row.get("title")) or self._text(raw_row.get("name"))
        if not place_id or not title:
            raise RecordTransformationError(
                "Missing required fields: placeid and title are required"
            )

        values: dict[str, Any] = {
            "place_id": place_id,
            "title": title,
            "category_name": self._text(raw_row.get("categoryname"))
            or self._text(raw_row.get("category")),
            "country_code": self._text(raw_row.get("countrycode")) or self._default_country_code,
            "reviews_count": self._to_int(raw_row.get("reviewscount")),
            "status": BusinessStatus.APPROVED,
            "submitted_by": CSV_IMPORT_SUBMITTER,
        }

        for column, attribute in TEXT_COLUMNS.items():
            values[attribute] = self._text(raw_row.get(column))
        for column, attribute in FLOAT_COLUMNS.items():
            values[attribute] = self._to_float(raw_row.get(column))
        for column, attribute in BOOLEAN_COLUMNS.items():
            values[attribute] = self._to_bool(raw_row.get(column))

        for column, attribute in JSON_COLUMNS.items():
            parsed, ok = self._parse_json(raw_row.get(column))
            if ok:
                if parsed is not None:
                    values[attribute] = parsed
                continue
            prefix = f"Row {row_number}: " if row_number is not None else ""
            message = f"{prefix}invalid JSON in '{column}' was dropped"
            logger.warning("%s value=%r", message, raw_row.get(column))
            if warnings is not None:
                warnings.append(message)

        values["seo_title"] = self._text(raw_row.get("seotitle")) or build_seo_title(
            title=title,
            city=values["city"],
            category_name=values["category_name"],
        )
        values["seo_description"] = self._text(raw_row.get("seodescription")) or build_seo_description(
            title=title,
            description=values["description"],
            address=values["address"],
            city=values["city"],
            phone=values["phone"],
        )

        return {
            key: (None if isinstance(value, str) and not value.strip() else value)
            for key, value in values.items()
        }

    @staticmethod
    def _text(value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _to_bool(value: Any) -> bool:
        return value is True or value == "true"

    @staticmethod
    def _to_float(value: Any) -> float | None:
        if value is None or not BusinessRowValidator.is_numeric(value):
            return None
        return float(str(value).strip())

    @staticmethod
    def _to_int(value: Any) -> int | None:
        if value is None or not BusinessRowValidator.is_numeric(value):
            return None
        raw = str(value).strip()
        try:
            return int(raw)
        except ValueError:
            return int(float(raw))

    @staticmethod
    def _parse_json(value: Any) -> tuple[Any, bool]:
        """
        Return (parsed, ok). Empty and null-literal inputs are (None, True).
        """

        if value is None:
            return None, True
        if not isinstance(value, str):
            return value, True
        raw = value.strip()
        if not raw or raw in _JSON_NULL_LITERALS:
            return None, True
        try:
            return load_strict_json(raw), True
        except (ValueError, RecursionError):
            return None, False


def build_seo_title(*, title: str, city: str | None, category_name: str | None) -> str:
    seo_title = title
    if city:
        seo_title += f" - {city}"
    if category_name:
        seo_title += f" | {category_name}"
    return seo_title


def build_seo_description(
    *,
    title: str,
    description: str | None,
    address: str | None,
    city: str | None,
    phone: str | None,
) -> str:
    if description:
        if len(description) > SEO_DESCRIPTION_MAX:
            return description[: SEO_DESCRIPTION_MAX - 3] + "..."
        return description

    parts = [f"Visit {title}"]
    if address:
        parts.append(f"located at {address}")
    if city:
        parts.append(f"in {city}")
    if phone:
        parts.append(f"Call {phone} for more information")
    sentence = " ".join(parts)
    if len(sentence) > SEO_FALLBACK_DESCRIPTION_MAX:
        return sentence[: SEO_FALLBACK_DESCRIPTION_MAX - 3] + "..."
    return sentence
