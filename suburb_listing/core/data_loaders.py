from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from suburb_listing.core.config import JOIN_KEY
from suburb_listing.io import read_csv_validated, read_excel_validated
from suburb_listing.models.schemas import (
    G01_RAW,
    G02_RAW,
    G62_RAW,
    GEOG_DESC_RAW,
    GEOGRAPHY,
    INCOME,
    MEDIAN_FAMILY_INCOME,
    MEDIAN_RENT,
    POPULATION,
    SUBURB,
    TOTAL_POPULATION,
)
from suburb_listing.models.validate import validate_df

LOGGER = logging.getLogger(__name__)

GEOG_SHEET_DEFAULT = "2021_ASGS_Non_ABS_Structures"
GEOG_STRUCTURE_DEFAULT = "SAL"


@dataclass(frozen=True)
class SourceFiles:
    """Locations of the four DataPack tables the listing is built from."""

    geography: Path  # metadata workbook (geography descriptors)
    population: Path  # G01
    income: Path  # G02
    commute: Path  # G62

    @classmethod
    def from_config(cls, datapack_dir: Path, cfg: dict) -> SourceFiles:
        """Resolve the `sources` block of the pipeline config against `datapack_dir`."""
        return cls(
            geography=datapack_dir / str(cfg["geography"]["path"]),
            population=datapack_dir / str(cfg["population"]["path"]),
            income=datapack_dir / str(cfg["income"]["path"]),
            commute=datapack_dir / str(cfg["commute"]["path"]),
        )


@dataclass(frozen=True)
class CurrencyFormat:
    symbol: str = "$"
    accuracy: float = 1
    big_mark: str = ""


def format_currency(values: pd.Series, fmt: CurrencyFormat = CurrencyFormat()) -> pd.Series:
    """Format numbers as currency strings, e.g. 425.4 -> "$425". NA stays NA."""

    def _one(v) -> str | None:
        if pd.isna(v):
            return None
        n = int(round(float(v) / fmt.accuracy) * fmt.accuracy)
        sign = "-" if n < 0 else ""
        digits = f"{abs(n):,}".replace(",", fmt.big_mark)
        return f"{sign}{fmt.symbol}{digits}"

    return values.map(_one).astype("string")


def load_geography(
    path: Path,
    *,
    sheet_name: str = GEOG_SHEET_DEFAULT,
    structure: str = GEOG_STRUCTURE_DEFAULT,
) -> pd.DataFrame:
    """Region codes and names for one ASGS structure (suburbs and localities by default)."""
    raw = read_excel_validated(
        path,
        sheet_name=sheet_name,
        dtype=str,
        schema=GEOG_DESC_RAW,
        stage="geography",
    )
    rows = raw[raw["ASGS_Structure"].isin([structure])]
    out = rows[["Census_Code_2021", "Census_Name_2021"]].rename(
        columns={"Census_Code_2021": JOIN_KEY, "Census_Name_2021": SUBURB}
    )
    LOGGER.info("Geography: %d %s regions (of %d descriptor rows)", len(out), structure, len(raw))
    return validate_df(out.reset_index(drop=True), GEOGRAPHY, stage="geography", path=path)


def load_population(path: Path) -> pd.DataFrame:
    """G01 total persons per region."""
    raw = read_csv_validated(path, dtype={JOIN_KEY: "string"}, schema=G01_RAW, stage="population")
    out = raw[[JOIN_KEY, "Tot_P_P"]].rename(columns={"Tot_P_P": TOTAL_POPULATION})
    return validate_df(out, POPULATION, stage="population", path=path)


def load_income(path: Path, *, currency: CurrencyFormat = CurrencyFormat()) -> pd.DataFrame:
    """G02 median weekly rent and family income, formatted as currency."""
    raw = read_csv_validated(path, dtype={JOIN_KEY: "string"}, schema=G02_RAW, stage="income")
    out = pd.DataFrame(
        {
            JOIN_KEY: raw[JOIN_KEY],
            MEDIAN_RENT: format_currency(raw["Median_rent_weekly"], currency),
            MEDIAN_FAMILY_INCOME: format_currency(raw["Median_tot_fam_inc_weekly"], currency),
        }
    )
    return validate_df(out, INCOME, stage="income", path=path)


def load_commute_wide(path: Path) -> pd.DataFrame:
    """G62 as published: one row per region, one count column per travel method."""
    return read_csv_validated(path, dtype={JOIN_KEY: "string"}, schema=G62_RAW, stage="commute")


@dataclass(frozen=True)
class SourceTables:
    """The four loaded inputs of the listing join."""

    geography: pd.DataFrame
    population: pd.DataFrame
    income: pd.DataFrame
    commute_wide: pd.DataFrame


def load_source_tables(
    sources: SourceFiles,
    *,
    geography_sheet: str = GEOG_SHEET_DEFAULT,
    structure: str = GEOG_STRUCTURE_DEFAULT,
    currency: CurrencyFormat = CurrencyFormat(),
) -> SourceTables:
    """Load and validate every source table (fails on the first bad file)."""
    LOGGER.info("Loading DataPack tables...")
    tables = SourceTables(
        geography=load_geography(sources.geography, sheet_name=geography_sheet, structure=structure),
        population=load_population(sources.population),
        income=load_income(sources.income, currency=currency),
        commute_wide=load_commute_wide(sources.commute),
    )
    LOGGER.info(
        "Loaded: geography=%d, population=%d, income=%d, commute=%d rows",
        len(tables.geography),
        len(tables.population),
        len(tables.income),
        len(tables.commute_wide),
    )
    return tables
