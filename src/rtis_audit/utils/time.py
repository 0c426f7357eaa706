from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd


def is_blank(value: object) -> bool:
    """True for ``None``, NaN/NaT and whitespace-only strings."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (float, np.floating)) or value is pd.NaT:
        return bool(pd.isna(value))
    return False


def to_utc_timestamp(value: object, *, dayfirst: bool = False) -> pd.Timestamp | None:
    """Parse one timestamp-like value into a tz-aware UTC ``Timestamp``.

    Naive values are assumed to be UTC. Returns ``None`` for empty or
    unparsable input. ``dayfirst`` reads ``01/02/2024`` as 1 February.
    """

    if is_blank(value):
        return None
    try:
        if isinstance(value, str):
            ts = pd.to_datetime(value.strip(), dayfirst=dayfirst)
        else:
            ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def to_utc_series(
    ts: pd.Series | Iterable[object],
    *,
    dayfirst: bool = False,
    format: str | None = None,
) -> pd.Series:
    """
    Robustly convert a pandas Series of timestamps to tz-aware UTC datetimes.
    Accepts:
      - strings with or without trailing 'Z'
      - strings with 'T' or space separator
      - tz-aware datetimes (converted to UTC)
      - naive datetimes (assumed UTC)
    With ``format`` the whole column is parsed with that one format; rows
    that do not fit it become NaT. Otherwise values are parsed one by one,
    honouring ``dayfirst`` for ambiguous day/month strings.
    Any unparsable element becomes NaT.
    """

    if not isinstance(ts, pd.Series):
        ts = pd.Series(list(ts), dtype="object")

    # Fast path: already datetime dtype
    if pd.api.types.is_datetime64_any_dtype(ts):
        if isinstance(ts.dtype, pd.DatetimeTZDtype):
            return ts.dt.tz_convert("UTC")
        return ts.dt.tz_localize("UTC")

    if format is not None:
        text = ts.map(lambda v: None if is_blank(v) else str(v).strip())
        return pd.to_datetime(text, format=format, utc=True, errors="coerce")

    def _one(x: object) -> pd.Timestamp:
        parsed = to_utc_timestamp(x, dayfirst=dayfirst)
        return pd.NaT if parsed is None else parsed

    return pd.to_datetime(ts.map(_one), utc=True, errors="coerce")
