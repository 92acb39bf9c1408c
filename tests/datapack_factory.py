"""Writers for small synthetic DataPack tables (G01/G02/G62 + geography workbook)."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from suburb_listing.core.data_loaders import SourceFiles

GEOG_SHEET = "2021_ASGS_Non_ABS_Structures"

# Four suburbs plus one code that only exists in the geography workbook.
REGIONS = [
    # code, name, population, rent, family income
    ("SAL20001", "Abbotsford", 9100, 425.4, 2899.6),
    ("SAL20002", "Brunswick", 24900, 450.0, 2700.0),
    ("SAL20003", "Carlton", 16000, 380.5, 1650.2),
    ("SAL20004", "Docklands", 15500, 520.0, 3100.0),
]

# Column order matters for the tie-break (first maximal column wins).
G62_COLUMNS = [
    "One_method_Train_P",
    "One_method_Bus_P",
    "One_method_Car_as_driver_P",
    "One_method_Car_as_driver_M",
    "One_method_Walked_only_P",
    "One_method_Tot_one_method_P",
    "Two_methods_Train_Bus_P",
    "Method_travel_to_work_ns_P",
    "Tot_P",
]


def g62_row(code: str, **counts: int) -> dict:
    row = {"SAL_CODE_2021": code}
    row.update({c: 0 for c in G62_COLUMNS})
    row.update(counts)
    return row


def write_csv(df: pd.DataFrame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path


def write_geography_xlsx(path: Path, rows: list[tuple[str, str, str]], *, sheet: str = GEOG_SHEET) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows, columns=["ASGS_Structure", "Census_Code_2021", "Census_Name_2021"])
    df.to_excel(path, sheet_name=sheet, index=False, engine="openpyxl")
    return path


def write_datapack(root: Path) -> SourceFiles:
    """Write a complete synthetic DataPack under `root` (tables/ + Metadata/)."""
    tables = root / "tables"
    geography = write_geography_xlsx(
        root / "Metadata" / "geog_desc.xlsx",
        [("SAL", code, name) for code, name, *_ in REGIONS]
        + [("SAL", "SAL29999", "Nowhere"), ("LGA", "LGA24600", "Melbourne")],
    )
    population = write_csv(
        pd.DataFrame(
            {
                "SAL_CODE_2021": [r[0] for r in REGIONS],
                "Tot_P_M": [r[2] // 2 for r in REGIONS],
                "Tot_P_P": [r[2] for r in REGIONS],
            }
        ),
        tables / "G01.csv",
    )
    income = write_csv(
        pd.DataFrame(
            {
                "SAL_CODE_2021": [r[0] for r in REGIONS],
                "Median_age_persons": [35, 31, 27, 33],
                "Median_rent_weekly": [r[3] for r in REGIONS],
                "Median_tot_fam_inc_weekly": [r[4] for r in REGIONS],
            }
        ),
        tables / "G02.csv",
    )
    commute = write_csv(
        pd.DataFrame(
            [
                g62_row("SAL20001", One_method_Train_P=50, One_method_Bus_P=10, Tot_P=60),
                g62_row("SAL20002"),
                g62_row(
                    "SAL20003",
                    One_method_Car_as_driver_P=5,
                    One_method_Walked_only_P=5,
                    One_method_Car_as_driver_M=99,
                ),
                g62_row("SAL20004", Two_methods_Train_Bus_P=7, One_method_Tot_one_method_P=500),
            ]
        ),
        tables / "G62.csv",
    )
    return SourceFiles(geography=geography, population=population, income=income, commute=commute)
