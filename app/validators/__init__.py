"""
app/validators package marker.
"""

from app.validators.business_row_validator import BusinessRowValidator

__all__ = [
    "BusinessRowValidator",
]
