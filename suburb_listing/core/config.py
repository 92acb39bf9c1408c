"""Project configuration (paths, join key, listing constants)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

# Every GCP SAL table shares this region identifier.
JOIN_KEY: str = "SAL_CODE_2021"

# Listing size (cards on the lesson page)
TOP_N: int = 100

CONFIG_FILE = Path("config") / "pipeline_config.yaml"


def project_root() -> Path:
    """Return repository root assuming this file lives in `<root>/suburb_listing/core/config.py`."""
    return Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Paths:
    root: Path
    config: Path
    data_raw: Path
    datapack: Path  # extracted DataPack (directories renamed to their aliases)
    data_processed: Path
    processed_meta: Path
    listing: Path  # published YAML consumed by the page listing


def get_paths(root: Path | None = None) -> Paths:
    r = project_root() if root is None else Path(root).resolve()
    data_raw = r / "data" / "raw"
    data_processed = r / "data" / "processed"
    return Paths(
        root=r,
        config=r / CONFIG_FILE,
        data_raw=data_raw,
        datapack=data_raw / "datapack",
        data_processed=data_processed,
        processed_meta=data_processed / "_meta",
        listing=r / "listing",
    )


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
