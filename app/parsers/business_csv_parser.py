"""
app/parsers/business_csv_parser.py

Turns a raw bulk-upload buffer into loosely-typed row dictionaries.

Header names are lowercased and trimmed, cell values are trimmed, and blank
cells become None. Malformed rows (too few or too many cells) are not errors
here; they surface later as validation errors on the missing fields.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator

from app.domain.business_import import RawRow


class BusinessCSVFormatError(ValueError):
    """
    Raised when the buffer cannot be read as a delimited file at all.
    """


class BusinessCSVParser:
    """
    Parses comma-delimited business exports.
    """

    def __init__(self, *, delimiter: str = ",") -> None:
        self._delimiter = delimiter

    def parse(self, buffer: bytes) -> list[RawRow]:
        """
        Materialize every row; downstream steps need random access by row index.
        """

        return list(self.iter_rows(buffer))

    def iter_rows(self, buffer: bytes) -> Iterator[RawRow]:
        """
        Lazily yield cleaned rows from the buffer.
        """

        _allow_field_size(len(buffer))
        text_stream = io.TextIOWrapper(io.BytesIO(buffer), encoding="utf-8-sig", newline="")
        try:
            reader = csv.reader(text_stream, delimiter=self._delimiter)
            try:
                header_cells = next(reader, None)
            except UnicodeDecodeError as exc:
                raise BusinessCSVFormatError("CSV must be UTF-8 encoded.") from exc
            except csv.Error as exc:
                raise BusinessCSVFormatError(f"Invalid CSV format: {exc}") from exc

            headers = [self.normalize_header(cell) for cell in header_cells or []]
            if not any(headers):
                raise BusinessCSVFormatError("CSV header row is missing.")

            while True:
                try:
                    cells = next(reader)
                except StopIteration:
                    return
                except UnicodeDecodeError as exc:
                    raise BusinessCSVFormatError("CSV must be UTF-8 encoded.") from exc
                except csv.Error as exc:
                    raise BusinessCSVFormatError(f"Invalid CSV format: {exc}") from exc

                if not cells:
                    # blank physical line
                    continue
                yield self._build_row(headers, cells)
        finally:
            text_stream.detach()

    def _build_row(self, headers: list[str], cells: list[str]) -> RawRow:
        row: RawRow = {}
        for index, header in enumerate(headers):
            if not header:
                continue
            raw_value = cells[index] if index < len(cells) else None
            row[header] = self.normalize_cell(raw_value)
        return row

    @staticmethod
    def normalize_header(value: str) -> str:
        return value.strip().lower()

    @staticmethod
    def normalize_cell(value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped if stripped else None


def _allow_field_size(size: int) -> None:
    # csv rejects fields over 128 KiB by default; no field can be longer than
    # the buffer itself. The limit is process-wide, so it only ever grows.
    if size > csv.field_size_limit():
        csv.field_size_limit(size)
