"""Header-name heuristics shared by the telemetry and asset readers."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from rtis_audit.errors import MissingRequiredColumn

_LETTERS_ONLY = re.compile(r"[^a-z]")
_COORD_NOISE = re.compile(r"[\"'°NESW\s]")


def find_column(headers: Iterable[str], candidates: Sequence[str]) -> str | None:
    """Return the first header matching a candidate name.

    A header matches when it equals the candidate ignoring case, or when its
    lower-cased letters alone equal the lower-cased candidate.
    """

    headers = [str(h) for h in headers]
    for name in candidates:
        wanted = name.lower()
        for header in headers:
            lowered = header.strip().lower()
            if lowered == wanted or _LETTERS_ONLY.sub("", lowered) == wanted:
                return header
    return None


def resolve_columns(
    df: pd.DataFrame,
    candidates: Mapping[str, Sequence[str]],
    *,
    source: str,
) -> dict[str, str]:
    """Map canonical names to source headers, raising when any is missing."""

    resolved: dict[str, str] = {}
    missing: list[str] = []
    for canonical, names in candidates.items():
        found = find_column(df.columns, names)
        if found is None:
            missing.append(canonical)
        else:
            resolved[canonical] = found
    if missing:
        raise MissingRequiredColumn(source, missing)
    return resolved


def clean_coord(value: object) -> float:
    """Parse a coordinate cell such as ``'21.1458° N'`` into a float (NaN if unusable)."""

    if value is None:
        return float("nan")
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        return float(value)
    text = _COORD_NOISE.sub("", str(value))
    if not text:
        return float("nan")
    try:
        return float(text)
    except ValueError:
        return float("nan")


def clean_coord_series(series: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(series):
        return series.astype("float64")
    return series.map(clean_coord).astype("float64")


def swap_if_transposed(lat: float, lon: float) -> tuple[float, float]:
    """Swap a lat/lon pair whose values only make sense the other way round."""

    if lat > 60 and lon < 40:
        return lon, lat
    return lat, lon


__all__ = [
    "clean_coord",
    "clean_coord_series",
    "find_column",
    "resolve_columns",
    "swap_if_transposed",
]
