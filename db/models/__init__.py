"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.business import Business, BusinessStatus
from db.models.category import Category

__all__ = [
    "Business",
    "BusinessStatus",
    "Category",
]
