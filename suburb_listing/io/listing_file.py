"""Serializer for the published listing (one YAML mapping per card)."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import yaml
from pydantic import ValidationError

from suburb_listing.core.errors import SerializationError
from suburb_listing.models.schemas import ListingRecord

LOGGER = logging.getLogger(__name__)


def _to_builtin(v: Any) -> Any:
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return None
    # numpy scalars -> python scalars so PyYAML's safe dumper accepts them
    return v.item() if hasattr(v, "item") else v


def listing_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Row-oriented records (column order kept), validated as `ListingRecord`s."""
    out: list[dict[str, Any]] = []
    for i, row in enumerate(df.to_dict(orient="records")):
        clean = {k: _to_builtin(v) for k, v in row.items()}
        try:
            rec = ListingRecord.model_validate(clean)
        except ValidationError as exc:
            raise SerializationError(f"row {i} is not a valid listing record: {exc}", stage="serialize") from exc
        out.append(rec.model_dump(by_alias=True))
    return out


def write_listing_yaml(df: pd.DataFrame, path: Path) -> int:
    """Write `df` as a YAML sequence of records and return the record count.

    The file is written next to `path` and moved into place only once fully
    dumped, so a failed run never leaves a partial listing behind.
    """
    path = Path(path)
    records = listing_records(df)

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            yaml.safe_dump(
                records, f, sort_keys=False, allow_unicode=True, default_flow_style=False
            )
        os.replace(tmp_name, path)
    except (OSError, yaml.YAMLError) as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise SerializationError(f"could not write listing: {exc}", stage="serialize", path=path) from exc

    LOGGER.info("Wrote %d listing records to %s", len(records), path)
    return len(records)


def read_listing_yaml(path: Path) -> list[dict[str, Any]]:
    """Parse a listing file back into validated records (same shape as written)."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise SerializationError(f"could not read listing: {exc}", stage="serialize", path=path) from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise SerializationError(
            f"listing must be a sequence of records, got {type(data).__name__}", stage="serialize", path=path
        )
    try:
        return [ListingRecord.model_validate(rec).model_dump(by_alias=True) for rec in data]
    except ValidationError as exc:
        raise SerializationError(f"invalid listing record: {exc}", stage="serialize", path=path) from exc
