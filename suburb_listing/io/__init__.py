"""Lightweight I/O helpers.

This module centralises:
- validated CSV/XLSX reads (`read_csv_validated`, `read_excel_validated`) at pipeline boundaries
- the one-shot archive download and the on-disk cache used by the fetch script
- provenance helpers (`IngestRecord`, `upsert_ingest_summary`, `sha256_file`)
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import pandas as pd
import requests
import yaml

from suburb_listing.core.errors import DownloadError, SourceFileError
from suburb_listing.io.compressed import extract_archive
from suburb_listing.io.listing_file import read_listing_yaml, write_listing_yaml
from suburb_listing.models.schemas import TableSchema
from suburb_listing.models.validate import validate_df

LOGGER = logging.getLogger(__name__)

USER_AGENT = "suburb-listing/0.1 (lesson data build)"

__all__ = [
    "IngestRecord",
    "cached",
    "download_file",
    "ensure_parent_dir",
    "extract_archive",
    "load_ingest_config",
    "read_csv_validated",
    "read_excel_validated",
    "read_listing_yaml",
    "sha256_file",
    "upsert_ingest_summary",
    "write_listing_yaml",
]


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def cached(
    path: Path,
    *,
    force: bool,
    read,
    build,
    write=None,
    validate=None,
) -> tuple[Any, bool]:
    """Cache-to-disk helper used by the fetch script.

    Returns (obj, used_cache).
    """
    if not force and path.exists() and path.stat().st_size > 0:
        obj = read(path)
        if validate is None or validate(obj):
            return obj, True
    obj = build()
    if write is not None:
        write(obj, path)
    return obj, False


def _require_file(path: Path, *, stage: str) -> None:
    if not path.is_file():
        raise SourceFileError("source file not found", stage=stage, path=path)


def read_csv_validated(
    path: Path,
    *,
    dtype: dict[str, str],
    schema: TableSchema,
    stage: str,
) -> pd.DataFrame:
    """Read a CSV and validate it against `schema`.

    Missing or unparsable files raise `SourceFileError`; contract violations
    raise `SchemaError`. Both name `stage` and `path`.
    """
    path = Path(path)
    _require_file(path, stage=stage)
    try:
        df = pd.read_csv(path, dtype=dtype)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise SourceFileError(f"could not parse CSV: {exc}", stage=stage, path=path) from exc
    LOGGER.info("Read %s: %d rows, %d cols", path.name, len(df), len(df.columns))
    return validate_df(df, schema, stage=stage, path=path)


def read_excel_validated(
    path: Path,
    *,
    sheet_name: str,
    dtype: dict[str, str] | type,
    schema: TableSchema,
    stage: str,
) -> pd.DataFrame:
    """Read one worksheet of an XLSX workbook and validate it against `schema`."""
    path = Path(path)
    _require_file(path, stage=stage)
    try:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=dtype, engine="openpyxl")
    except (BadZipFile, ValueError, KeyError) as exc:
        # openpyxl reports a missing worksheet as ValueError/KeyError, a corrupt workbook as BadZipFile
        raise SourceFileError(
            f"could not read worksheet {sheet_name!r}: {exc}", stage=stage, path=path
        ) from exc
    LOGGER.info("Read %s[%s]: %d rows, %d cols", path.name, sheet_name, len(df), len(df.columns))
    return validate_df(df, schema, stage=stage, path=path)


def sha256_file(path: Path) -> str:
    """Return SHA256 hex digest for a file."""
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def download_file(url: str, out_path: Path, *, timeout_s: float = 300.0) -> Path:
    """Stream a URL to disk. Any network or HTTP error raises `DownloadError`.

    The body is written to a `.part` file first so an interrupted download never
    looks like a cached archive.
    """
    ensure_parent_dir(out_path)
    tmp = out_path.with_name(out_path.name + ".part")
    try:
        with requests.get(
            url, timeout=timeout_s, stream=True, headers={"User-Agent": USER_AGENT}
        ) as r:
            r.raise_for_status()
            with tmp.open("wb") as f:
                for chunk in r.iter_content(chunk_size=1024 * 1024):
                    f.write(chunk)
    except requests.exceptions.RequestException as exc:
        tmp.unlink(missing_ok=True)
        raise DownloadError(f"GET {url} failed: {exc}", stage="fetch", path=out_path) from exc
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise DownloadError(f"could not write download: {exc}", stage="fetch", path=out_path) from exc
    tmp.replace(out_path)
    LOGGER.info("Downloaded %s (%d bytes)", out_path.name, out_path.stat().st_size)
    return out_path


@dataclass(frozen=True)
class IngestRecord:
    """Row-level metadata for the ingest inventory CSV (default: `data/processed/_meta/ingest_summary.csv`)."""

    dataset: str
    stage: str  # e.g. "raw" / "published"
    path: str
    rows: int | None
    cols: int | None
    bytes: int | None
    source: str
    notes: str = ""


def load_ingest_config(path: Path) -> dict[str, Any]:
    """Load the YAML pipeline config file."""
    return yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}


def upsert_ingest_summary(records: list[IngestRecord], summary_csv: Path) -> None:
    """Upsert ingest records into a summary CSV keyed by `dataset`."""
    ensure_parent_dir(summary_csv)
    new_df = pd.DataFrame([asdict(r) for r in records])
    new_df["dataset"] = new_df["dataset"].astype(str)

    if summary_csv.exists():
        old = pd.read_csv(summary_csv, dtype={"dataset": "string"})
        old["dataset"] = old["dataset"].astype(str)
        old = old[~old["dataset"].isin(set(new_df["dataset"].tolist()))]
        df = pd.concat([old, new_df], ignore_index=True)
    else:
        df = new_df

    df = df.sort_values(["dataset"], kind="mergesort").reset_index(drop=True)
    df.to_csv(summary_csv, index=False)
