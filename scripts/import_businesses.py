"""
Import a business CSV export from the command line.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from app.domain.business_import import ImportOptions
from app.repositories.business_repository import BusinessRepository
from app.services.business_import_service import get_business_import_service
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Import businesses from a CSV export.")
    parser.add_argument("csv_path", help="Path to the CSV file.")
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Print headers and the first rows with their validation errors, then exit.",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate every row without writing anything.",
    )
    parser.add_argument(
        "--update-duplicates",
        action="store_true",
        help="Overwrite businesses whose placeid already exists.",
    )
    parser.add_argument(
        "--no-skip-duplicates",
        dest="skip_duplicates",
        action="store_false",
        help="Report existing placeids as errors instead of skipping them.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Rows per commit (defaults to BUSINESS_IMPORT_BATCH_SIZE).",
    )
    args = parser.parse_args()

    buffer = Path(args.csv_path).read_bytes()
    service = get_business_import_service()

    if args.preview:
        print(json.dumps(asdict(service.preview(buffer)), indent=2, default=str))
        return 0

    defaults = service.default_options()
    options = ImportOptions(
        update_duplicates=args.update_duplicates,
        skip_duplicates=args.skip_duplicates,
        validate_only=args.validate_only,
        batch_size=args.batch_size or defaults.batch_size,
    )
    with SessionLocal() as db:
        result = service.import_csv(buffer, store=BusinessRepository(db), options=options)

    print(json.dumps(asdict(result), indent=2, default=str))
    return 0 if not result.errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
