"""Pydantic models and dataframe schema validators.

These are contracts to keep the listing build deterministic:
- Each loader validates the raw table it reads and the table it returns.
- The joiner validates the final listing before it is serialized.
"""

from __future__ import annotations

from suburb_listing.models.schemas import (
    COMMUTE,
    GEOGRAPHY,
    INCOME,
    LISTING,
    LISTING_COLUMNS,
    POPULATION,
    ListingRecord,
    TableSchema,
)
from suburb_listing.models.validate import validate_df

__all__ = [
    "TableSchema",
    "ListingRecord",
    "validate_df",
    "GEOGRAPHY",
    "POPULATION",
    "INCOME",
    "COMMUTE",
    "LISTING",
    "LISTING_COLUMNS",
]
