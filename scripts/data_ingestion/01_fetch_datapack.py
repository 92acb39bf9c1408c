"""Step 1: Download the ABS GCP DataPack archive and extract it.

The archive is cached at `data/raw/<archive_file>`; pass `--force` to fetch it
again. Extraction always runs, and the DataPack's table directory is renamed
to the alias configured under `datapack.rename`.

Run:
  python scripts/data_ingestion/01_fetch_datapack.py
"""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path

# Ensure repo root is on sys.path so `import suburb_listing...` works when executing this file directly.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from suburb_listing.core.cli_utils import create_base_parser
from suburb_listing.core.config import Paths, configure_logging, get_paths
from suburb_listing.io import (
    IngestRecord,
    cached,
    download_file,
    extract_archive,
    load_ingest_config,
    sha256_file,
    upsert_ingest_summary,
)

LOGGER = logging.getLogger("fetch_datapack")


def _parse_args() -> argparse.Namespace:
    return create_base_parser("Download and extract the ABS GCP DataPack.").parse_args()


def run(
    *,
    force: bool = False,
    checkpoint: bool = False,
    paths: Paths | None = None,
    config_path: Path | None = None,
) -> dict[str, int | str]:
    """Run the DataPack fetch. Returns a small dict of key counts."""
    paths = get_paths() if paths is None else paths
    cfg = load_ingest_config(config_path or paths.config)["datapack"]

    url = str(cfg["url"])
    archive = paths.data_raw / str(cfg["archive_file"])
    timeout_s = float(cfg.get("timeout_seconds", 300))

    def _build() -> Path:
        LOGGER.info("Downloading DataPack from %s ...", url)
        return download_file(url, archive, timeout_s=timeout_s)

    _, used_cache = cached(
        archive,
        force=force,
        read=lambda p: p,
        build=_build,
        validate=zipfile.is_zipfile,
    )
    if used_cache:
        LOGGER.info("Using cached DataPack archive: %s", archive)

    extract_archive(archive, paths.datapack, rename=cfg.get("rename") or {})
    n_files = sum(1 for p in paths.datapack.rglob("*") if p.is_file())
    LOGGER.info("DataPack files available: %d", n_files)

    record = IngestRecord(
        dataset="abs_gcp_datapack",
        stage="raw",
        path=str(archive.relative_to(paths.root)),
        rows=n_files,
        cols=None,
        bytes=archive.stat().st_size,
        source=url,
        notes=f"Extracted to {paths.datapack.relative_to(paths.root)}. used_cache={int(used_cache)}",
    )
    upsert_ingest_summary([record], paths.processed_meta / "ingest_summary.csv")
    LOGGER.info("Wrote/updated %s", paths.processed_meta / "ingest_summary.csv")

    out: dict[str, int | str] = {
        "datapack_files": n_files,
        "datapack_used_cache": int(used_cache),
    }
    if checkpoint:
        out["sha_datapack_zip"] = sha256_file(archive)
        LOGGER.info("CHECKPOINT: %s", out)
    return out


def main() -> None:
    configure_logging()
    args = _parse_args()
    run(force=args.force, checkpoint=args.checkpoint, config_path=args.config)


if __name__ == "__main__":
    main()
