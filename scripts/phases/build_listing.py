"""Listing builder: turn the extracted DataPack into the suburb card YAML.

Run from repo root:
  python scripts/phases/build_listing.py

Outputs:
- listing/suburbs.yml (one record per card: title, Code, Total population,
  Median weekly rent, Median weekly family income, Most popular commute method)
- data/processed/_meta/ingest_summary.csv (updated)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure repo root is on sys.path so `import suburb_listing...` works when executing this file directly.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from suburb_listing.core.cli_utils import create_base_parser
from suburb_listing.core.config import TOP_N, Paths, configure_logging, get_paths
from suburb_listing.core.data_loaders import (
    GEOG_SHEET_DEFAULT,
    GEOG_STRUCTURE_DEFAULT,
    CurrencyFormat,
    SourceFiles,
    load_source_tables,
)
from suburb_listing.data_processing.listing_build import build_listing_from_tables
from suburb_listing.io import (
    IngestRecord,
    load_ingest_config,
    sha256_file,
    upsert_ingest_summary,
    write_listing_yaml,
)

LOGGER = logging.getLogger("listing_builder")


def _parse_args() -> argparse.Namespace:
    return create_base_parser("Build the suburb listing YAML from the extracted DataPack.").parse_args()


def run(
    *,
    checkpoint: bool = False,
    paths: Paths | None = None,
    config_path: Path | None = None,
) -> dict[str, int | str]:
    """Build and publish the listing. Returns a small dict of key counts."""
    paths = get_paths() if paths is None else paths
    cfg = load_ingest_config(config_path or paths.config)
    sources_cfg = cfg["sources"]
    listing_cfg = cfg["listing"]

    sources = SourceFiles.from_config(paths.datapack, sources_cfg)
    currency = CurrencyFormat(**(listing_cfg.get("currency") or {}))
    top_n = int(listing_cfg.get("top_n", TOP_N))

    tables = load_source_tables(
        sources,
        geography_sheet=str(sources_cfg["geography"].get("sheet", GEOG_SHEET_DEFAULT)),
        structure=str(sources_cfg["geography"].get("structure", GEOG_STRUCTURE_DEFAULT)),
        currency=currency,
    )
    listing = build_listing_from_tables(tables, top_n=top_n)

    out_path = paths.listing / str(listing_cfg["output"])
    n_records = write_listing_yaml(listing, out_path)

    record = IngestRecord(
        dataset="suburb_listing",
        stage="published",
        path=str(out_path.relative_to(paths.root)),
        rows=n_records,
        cols=len(listing.columns),
        bytes=out_path.stat().st_size,
        source=str(sources.population.relative_to(paths.root)),
        notes=f"Top {top_n} regions by total population.",
    )
    upsert_ingest_summary([record], paths.processed_meta / "ingest_summary.csv")
    LOGGER.info("Wrote/updated %s", paths.processed_meta / "ingest_summary.csv")

    out: dict[str, int | str] = {
        "listing_records": n_records,
        "regions_joined": len(tables.population),
    }
    if checkpoint:
        out["sha_listing_yml"] = sha256_file(out_path)
        LOGGER.info("CHECKPOINT: %s", out)
    return out


def main() -> None:
    configure_logging()
    args = _parse_args()
    run(checkpoint=args.checkpoint, config_path=args.config)


if __name__ == "__main__":
    main()
