"""Validation utilities for pipeline dataframe contracts."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from suburb_listing.core.errors import SchemaError
from suburb_listing.models.schemas import TableSchema


def validate_df(
    df: pd.DataFrame,
    schema: TableSchema,
    *,
    stage: str | None = None,
    path: Path | None = None,
    coerce_dtypes: bool = True,
    allow_extra_columns: bool = True,
) -> pd.DataFrame:
    """Validate a dataframe against a schema. Returns a (possibly coerced) copy.

    Violations raise `SchemaError` tagged with `stage` (defaults to the schema
    name) and the source `path`, if any.
    """
    stage = stage or schema.name

    missing = [c for c in schema.required_columns if c not in df.columns]
    if missing:
        raise SchemaError(f"{schema.name}: missing required columns: {missing}", stage=stage, path=path)

    if not allow_extra_columns:
        extra = [c for c in df.columns if c not in schema.allowed_columns()]
        if extra:
            raise SchemaError(f"{schema.name}: unexpected columns: {extra}", stage=stage, path=path)

    out = df.copy()

    if coerce_dtypes and schema.dtypes:
        for col, dtype in schema.dtypes.items():
            if col not in out.columns:
                continue
            try:
                out[col] = out[col].astype(dtype)
            except (TypeError, ValueError) as exc:
                raise SchemaError(
                    f"{schema.name}: failed to coerce column '{col}' to dtype '{dtype}': {exc}",
                    stage=stage,
                    path=path,
                ) from exc

    if schema.non_null:
        bad = [c for c in schema.non_null if c in out.columns and out[c].isna().any()]
        if bad:
            counts = {c: int(out[c].isna().sum()) for c in bad}
            raise SchemaError(
                f"{schema.name}: non-null columns contain NA values: {counts}", stage=stage, path=path
            )

    for col in schema.unique:
        if col not in out.columns:
            continue
        dupes = out.loc[out[col].duplicated(keep=False), col]
        if not dupes.empty:
            sample = sorted(dupes.astype(str).unique().tolist())[:5]
            raise SchemaError(
                f"{schema.name}: column '{col}' has duplicate values (e.g. {sample})",
                stage=stage,
                path=path,
            )

    return out
