"""
app/repositories/category_match.py

SQL expressions reconciling free-text business categories with the catalog.

Match strength, strongest first:

    1  exact name
    2  business category + "s" equals catalog name   ("Cafe"  -> "Cafes")
    3  catalog name + "s" equals business category   ("Bars"  <- "Bar")
    4  case-insensitive containment, either direction

The expressions are plain CASE/LIKE so the same query runs on PostgreSQL and
SQLite.
"""

from __future__ import annotations

from sqlalchemy import String, and_, case, func, or_
from sqlalchemy.sql.elements import ColumnElement

from db.models.business import Business
from db.models.category import Category

EXACT_MATCH = 1
PLURAL_OF_BUSINESS_MATCH = 2
PLURAL_OF_CATALOG_MATCH = 3
CONTAINMENT_MATCH = 4


def category_match_rank(
    business_category: ColumnElement | None = None,
    catalog_name: ColumnElement | None = None,
) -> ColumnElement:
    """
    Rank of the match between two names, NULL when they do not match at all.
    """

    business_category = business_category if business_category is not None else Business.category_name
    catalog_name = catalog_name if catalog_name is not None else Category.name
    business_lower = func.lower(business_category, type_=String)
    catalog_lower = func.lower(catalog_name, type_=String)

    return case(
        (catalog_name == business_category, EXACT_MATCH),
        (business_category + "s" == catalog_name, PLURAL_OF_BUSINESS_MATCH),
        (catalog_name + "s" == business_category, PLURAL_OF_CATALOG_MATCH),
        (
            or_(
                business_lower.contains(catalog_lower),
                catalog_lower.contains(business_lower),
            ),
            CONTAINMENT_MATCH,
        ),
        else_=None,
    )


def category_join_condition() -> ColumnElement[bool]:
    """
    ON clause for the broad business x catalog candidate join.

    Blank category text is excluded; it would otherwise "contain" every name.
    """

    return and_(
        Business.category_name.is_not(None),
        Business.category_name != "",
        category_match_rank().is_not(None),
    )
