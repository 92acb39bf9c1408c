"""Join the per-region tables into the card listing and keep the most populous suburbs.

Population drives the join: a region missing from G01 never reaches the
listing, while regions missing from the other tables keep empty values
(commute method defaults to "").
"""

from __future__ import annotations

import logging

import pandas as pd

from suburb_listing.core.config import JOIN_KEY, TOP_N
from suburb_listing.core.data_loaders import SourceTables
from suburb_listing.core.errors import EmptyResultError, SchemaError
from suburb_listing.data_processing.commute_mode import reduce_commute_modes
from suburb_listing.models.schemas import (
    CODE,
    COMMUTE_METHOD,
    LISTING,
    LISTING_COLUMNS,
    SUBURB,
    TITLE,
    TOTAL_POPULATION,
)
from suburb_listing.models.validate import validate_df

LOGGER = logging.getLogger(__name__)


def _left_join(left: pd.DataFrame, right: pd.DataFrame, *, name: str) -> pd.DataFrame:
    try:
        return left.merge(right, on=JOIN_KEY, how="left", validate="many_to_one")
    except pd.errors.MergeError as exc:
        raise SchemaError(f"{name}: {JOIN_KEY} is not unique ({exc})", stage="join") from exc


def build_listing(
    population: pd.DataFrame,
    income: pd.DataFrame,
    commute: pd.DataFrame,
    geography: pd.DataFrame,
    *,
    top_n: int = TOP_N,
) -> pd.DataFrame:
    """Return the `top_n` most populous regions, one row per card, most populous first."""
    if top_n <= 0:
        raise ValueError(f"top_n must be positive, got {top_n}")

    df = population
    for name, table in (("income", income), ("commute", commute), ("geography", geography)):
        df = _left_join(df, table, name=name)
    if df.empty:
        raise EmptyResultError("join produced 0 rows", stage="join")

    df = df.rename(columns={SUBURB: TITLE, JOIN_KEY: CODE})
    df[TOTAL_POPULATION] = df[TOTAL_POPULATION].astype("int64")
    df[COMMUTE_METHOD] = df[COMMUTE_METHOD].astype("string").fillna("")
    df = df[list(LISTING_COLUMNS)]

    top = df.nlargest(top_n, TOTAL_POPULATION, keep="first").reset_index(drop=True)
    LOGGER.info(
        "Listing: kept %d of %d joined regions (population cut-off %s)",
        len(top),
        len(df),
        int(top[TOTAL_POPULATION].min()),
    )
    return validate_df(top, LISTING, stage="join", allow_extra_columns=False)


def build_listing_from_tables(tables: SourceTables, *, top_n: int = TOP_N) -> pd.DataFrame:
    """Reduce G62 and join every loaded table."""
    commute = reduce_commute_modes(tables.commute_wide)
    return build_listing(
        tables.population, tables.income, commute, tables.geography, top_n=top_n
    )
