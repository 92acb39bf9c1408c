"""Reduce the G62 travel-to-work table to one display label per region.

G62 is wide: one count column per travel method, split into three tiers
(one, two or three methods on the day) and spelled either in full or in the
abbreviated short-header form. We melt it to long form, drop zero counts and
keep the single most common method for each region.

Tie-break: when several methods share the maximum count, the one whose column
comes first in the source table wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from suburb_listing.core.config import JOIN_KEY
from suburb_listing.core.errors import SchemaError
from suburb_listing.models.schemas import COMMUTE, COMMUTE_METHOD
from suburb_listing.models.validate import validate_df

LOGGER = logging.getLogger(__name__)

PERSONS_SUFFIX = "_P"

# Column-name tokens that mark totals or "not stated" rather than a method.
EXCLUDE_TOKENS: tuple[str, ...] = ("Tot", "_ns")

# Applied in order. A specific spelling must come before any shorter pattern
# it contains; matched text is never re-matched by a later pattern.
METHOD_LABELS: tuple[tuple[str, str], ...] = (
    # tier prefixes
    ("Three_methods_", ""),
    ("Three_meth_", ""),
    ("Two_methods_", ""),
    ("Two_meth_", ""),
    ("One_method_", ""),
    ("One_meth_", ""),
    # residual combinations
    ("Oth_three_meth", "🔀 Other combination"),
    ("Other_two_meth", "🔀 Other combination"),
    ("Oth_two_meth", "🔀 Other combination"),
    ("two_other_meth", "+ 2 others"),
    ("two_oth_meth", "+ 2 others"),
    ("2_other_meth", "+ 2 others"),
    ("2_oth_meth", "+ 2 others"),
    # single methods
    ("Train", "🚂 Train"),
    ("Trn", "🚂 Train"),
    ("Bus", "🚌 Bus"),
    ("Ferry", "⛴️ Ferry"),
    ("Tram_or_lt_rail", "🚋 Tram"),
    ("Tram_lt_rail", "🚋 Tram"),
    ("Tram", "🚋 Tram"),
    ("Taxi_ride_share", "🚕 Taxi"),
    ("Taxi_ride_sh", "🚕 Taxi"),
    ("Taxi", "🚕 Taxi"),
    ("Car_as_passenger", "🚘 Passenger"),
    ("Car_passenger", "🚘 Passenger"),
    ("Car_as_pass", "🚘 Passenger"),
    ("Car_pass", "🚘 Passenger"),
    ("Car_as_driver", "🚗 Driving"),
    ("Car_driver", "🚗 Driving"),
    ("Car_as_drvr", "🚗 Driving"),
    ("Car_drvr", "🚗 Driving"),
    ("Truck", "🚚 Truck"),
    ("Motorbike_scooter", "🛵 Motorbike"),
    ("Motorbike_scootr", "🛵 Motorbike"),
    ("Motorbike", "🛵 Motorbike"),
    ("Bicycle", "🚲 Bicycle"),
    ("Walked_only", "🚶 Walk"),
    ("Walked", "🚶 Walk"),
    ("Worked_at_home", "🏠 Worked from home"),
    ("Worked_home", "🏠 Worked from home"),
    ("Did_not_go_to_work", "🛋️ Didn't go to work"),
    ("Other", "❓ Other"),
    ("Oth", "❓ Other"),
    # separators between methods of a combination
    ("_", " "),
)


def label_method(code: str, labels: Sequence[tuple[str, str]] = METHOD_LABELS) -> str:
    """Turn a raw G62 method code into a display label.

    >>> label_method("Two_methods_Train_Bus")
    '🚂 Train 🚌 Bus'
    """
    # (text, already_replaced) segments
    parts: list[tuple[str, bool]] = [(code, False)]
    for pattern, replacement in labels:
        nxt: list[tuple[str, bool]] = []
        for text, done in parts:
            if done or pattern not in text:
                nxt.append((text, done))
                continue
            for i, chunk in enumerate(text.split(pattern)):
                if i:
                    nxt.append((replacement, True))
                if chunk:
                    nxt.append((chunk, False))
        parts = nxt
    return " ".join("".join(text for text, _ in parts).split())


def method_columns(
    columns: Sequence[str],
    *,
    key: str = JOIN_KEY,
    persons_suffix: str = PERSONS_SUFFIX,
    exclude: Sequence[str] = EXCLUDE_TOKENS,
) -> list[str]:
    """Persons-count columns that describe a travel method, in source order."""
    return [
        c
        for c in columns
        if c != key and c.endswith(persons_suffix) and not any(tok in c for tok in exclude)
    ]


def reduce_commute_modes(
    wide: pd.DataFrame,
    *,
    persons_suffix: str = PERSONS_SUFFIX,
    exclude: Sequence[str] = EXCLUDE_TOKENS,
    labels: Sequence[tuple[str, str]] = METHOD_LABELS,
) -> pd.DataFrame:
    """One row per region: (`SAL_CODE_2021`, most popular commute method label).

    Regions where every method count is zero are absent from the result.
    """
    key = JOIN_KEY
    if key not in wide.columns:
        raise SchemaError(f"commute table has no key column {key!r}", stage="commute")
    cols = method_columns(wide.columns, key=key, persons_suffix=persons_suffix, exclude=exclude)
    if not cols:
        raise SchemaError(
            f"commute table has no method columns ending in {persons_suffix!r}", stage="commute"
        )

    long = wide[[key, *cols]].melt(id_vars=key, var_name="method", value_name="count")
    try:
        long["count"] = pd.to_numeric(long["count"])
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"non-numeric commute count: {exc}", stage="commute") from exc
    long = long[long["count"].fillna(0) > 0]

    order = {c: i for i, c in enumerate(cols)}
    long = long.assign(_order=long["method"].map(order))
    top = (
        long.sort_values(["count", "_order"], ascending=[False, True], kind="mergesort")
        .drop_duplicates(subset=[key], keep="first")
        .sort_values(key, kind="mergesort")
    )

    out = pd.DataFrame(
        {
            key: top[key].to_numpy(),
            COMMUTE_METHOD: [
                label_method(m.removesuffix(persons_suffix), labels) for m in top["method"]
            ],
        }
    )
    LOGGER.info(
        "Commute: %d regions with a most popular method (of %d), %d method columns",
        len(out),
        len(wide),
        len(cols),
    )
    return validate_df(out, COMMUTE, stage="commute")
