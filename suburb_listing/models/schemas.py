"""Schema definitions for pipeline dataframe contracts.

This module contains only:
- column names shared by loaders, the joiner and the serializer
- `TableSchema` (schema metadata container)
- concrete table schemas (e.g., `POPULATION`, `LISTING`, ...)
- `ListingRecord`, the per-card contract of the published YAML file
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from suburb_listing.core.config import JOIN_KEY

# Display columns (these names end up as YAML keys)
SUBURB = "Suburb"
TITLE = "title"
CODE = "Code"
TOTAL_POPULATION = "Total population"
MEDIAN_RENT = "Median weekly rent"
MEDIAN_FAMILY_INCOME = "Median weekly family income"
COMMUTE_METHOD = "Most popular commute method"

LISTING_COLUMNS: tuple[str, ...] = (
    TITLE,
    CODE,
    TOTAL_POPULATION,
    MEDIAN_RENT,
    MEDIAN_FAMILY_INCOME,
    COMMUTE_METHOD,
)


class TableSchema(BaseModel):
    """A simple schema for a pandas DataFrame (column-level contract)."""

    name: str
    required_columns: tuple[str, ...] = Field(default_factory=tuple)
    optional_columns: tuple[str, ...] = Field(default_factory=tuple)
    # pandas dtype strings, e.g. "string", "Int64", "int64"
    dtypes: Mapping[str, str] = Field(default_factory=dict)
    non_null: tuple[str, ...] = Field(default_factory=tuple)
    unique: tuple[str, ...] = Field(default_factory=tuple)

    def allowed_columns(self) -> set[str]:
        return set(self.required_columns) | set(self.optional_columns)


# Raw GCP inputs (validated right after reading, before projection)
G01_RAW = TableSchema(
    name="g01_selected_person_characteristics",
    required_columns=(JOIN_KEY, "Tot_P_P"),
    dtypes={JOIN_KEY: "string"},
    non_null=(JOIN_KEY,),
)

G02_RAW = TableSchema(
    name="g02_medians_and_averages",
    required_columns=(JOIN_KEY, "Median_rent_weekly", "Median_tot_fam_inc_weekly"),
    dtypes={JOIN_KEY: "string", "Median_rent_weekly": "Float64", "Median_tot_fam_inc_weekly": "Float64"},
    non_null=(JOIN_KEY,),
)

G62_RAW = TableSchema(
    name="g62_method_of_travel_to_work",
    required_columns=(JOIN_KEY,),
    dtypes={JOIN_KEY: "string"},
    non_null=(JOIN_KEY,),
)

GEOG_DESC_RAW = TableSchema(
    name="geography_descriptor",
    required_columns=("ASGS_Structure", "Census_Code_2021", "Census_Name_2021"),
    dtypes={"ASGS_Structure": "string", "Census_Code_2021": "string", "Census_Name_2021": "string"},
)

# Loader outputs
GEOGRAPHY = TableSchema(
    name="geography",
    required_columns=(JOIN_KEY, SUBURB),
    dtypes={JOIN_KEY: "string", SUBURB: "string"},
    non_null=(JOIN_KEY, SUBURB),
)

POPULATION = TableSchema(
    name="population",
    required_columns=(JOIN_KEY, TOTAL_POPULATION),
    dtypes={JOIN_KEY: "string", TOTAL_POPULATION: "int64"},
    non_null=(JOIN_KEY, TOTAL_POPULATION),
)

INCOME = TableSchema(
    name="income",
    required_columns=(JOIN_KEY, MEDIAN_RENT, MEDIAN_FAMILY_INCOME),
    dtypes={JOIN_KEY: "string", MEDIAN_RENT: "string", MEDIAN_FAMILY_INCOME: "string"},
    non_null=(JOIN_KEY,),
)

COMMUTE = TableSchema(
    name="commute",
    required_columns=(JOIN_KEY, COMMUTE_METHOD),
    dtypes={JOIN_KEY: "string", COMMUTE_METHOD: "string"},
    non_null=(JOIN_KEY, COMMUTE_METHOD),
    unique=(JOIN_KEY,),
)

LISTING = TableSchema(
    name="listing",
    required_columns=LISTING_COLUMNS,
    dtypes={
        TITLE: "string",
        CODE: "string",
        TOTAL_POPULATION: "int64",
        MEDIAN_RENT: "string",
        MEDIAN_FAMILY_INCOME: "string",
        COMMUTE_METHOD: "string",
    },
    non_null=(TITLE, CODE, TOTAL_POPULATION, COMMUTE_METHOD),
    unique=(CODE,),
)


class ListingRecord(BaseModel):
    """One card in the published listing file, keyed by `title`."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str
    code: str = Field(alias=CODE, min_length=1)
    total_population: int = Field(alias=TOTAL_POPULATION, ge=0)
    median_weekly_rent: str | None = Field(alias=MEDIAN_RENT)
    median_weekly_family_income: str | None = Field(alias=MEDIAN_FAMILY_INCOME)
    commute_method: str = Field(alias=COMMUTE_METHOD)
