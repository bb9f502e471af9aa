"""
app/parsers package marker.
"""

from app.parsers.business_csv_parser import BusinessCSVFormatError, BusinessCSVParser

__all__ = [
    "BusinessCSVFormatError",
    "BusinessCSVParser",
]
