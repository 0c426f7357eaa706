"""Clean, window and order raw telemetry into ``TelemetrySample`` records."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
import pandas as pd
import structlog

from rtis_audit.errors import EmptyTimeWindow, InvalidTimeWindow, NoValidTelemetry
from rtis_audit.utils.geo import bearing_deg, distance_m
from rtis_audit.utils.time import is_blank, to_utc_series, to_utc_timestamp

from .ingestion.columns import clean_coord_series
from .ingestion.telemetry_reader import TelemetryReader
from .schemas import TelemetrySample

logger = structlog.get_logger(__name__)

# Displacements below this are GPS jitter; heading is carried over instead.
HEADING_MIN_DISPLACEMENT_M = 5.0


def compute_headings(lat: Sequence[float], lon: Sequence[float]) -> list[float]:
    """Heading per fix: bearing to the next fix, or the previous heading when stationary."""

    n = len(lat)
    headings = [0.0] * n
    for i in range(n - 1):
        if distance_m(lat[i], lon[i], lat[i + 1], lon[i + 1]) >= HEADING_MIN_DISPLACEMENT_M:
            headings[i] = bearing_deg(lat[i], lon[i], lat[i + 1], lon[i + 1])
        elif i > 0:
            headings[i] = headings[i - 1]
    if n > 1:
        headings[-1] = headings[-2]
    return headings


def _round_speed(speed: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(speed, errors="coerce").fillna(0.0)
    return np.floor(numeric.astype("float64") + 0.5).astype("int64")


def _window_bounds(
    departure: object, arrival: object, *, dayfirst: bool = False
) -> tuple[pd.Timestamp | None, pd.Timestamp | None]:
    dep = to_utc_timestamp(departure, dayfirst=dayfirst)
    arr = to_utc_timestamp(arrival, dayfirst=dayfirst)
    # Supplied but unreadable bounds are rejected, never ignored.
    for name, value, parsed in (("departure", departure, dep), ("arrival", arrival, arr)):
        if parsed is None and not is_blank(value):
            raise InvalidTimeWindow(
                departure, arrival, f"Cannot parse {name} time {value!r}."
            )
    if dep is not None and arr is not None and arr <= dep:
        raise InvalidTimeWindow(dep, arr)
    return dep, arr


def clean_telemetry(
    raw: pd.DataFrame | Sequence[Mapping[str, object]],
    *,
    dayfirst: bool = False,
    timestamp_format: str | None = None,
) -> pd.DataFrame:
    """Return typed, coordinate-checked telemetry in source order.

    Columns: ``timestamp`` (UTC), ``timestamp_text``, ``lat``, ``lon`` and
    ``speed_kmph`` (integer km/h). Raises :class:`NoValidTelemetry` when
    nothing usable remains. ``dayfirst`` and ``timestamp_format`` control how
    text timestamps are read (see :func:`~rtis_audit.utils.time.to_utc_series`).
    """

    if isinstance(raw, pd.DataFrame):
        df = TelemetryReader.from_frame(raw)
    else:
        df = TelemetryReader.from_records(raw)
    total = len(df)

    lat = clean_coord_series(df["lat"])
    lon = clean_coord_series(df["lon"])
    swap = (lat > 60) & (lon < 40)
    lat, lon = lat.where(~swap, lon), lon.where(~swap, lat)

    out = pd.DataFrame(
        {
            "timestamp": to_utc_series(
                df["timestamp"], dayfirst=dayfirst, format=timestamp_format
            ),
            "timestamp_text": df["timestamp"].map(lambda v: "" if pd.isna(v) else str(v).strip()),
            "lat": lat,
            "lon": lon,
            "speed_kmph": _round_speed(df["speed_kmph"]),
        }
    )
    usable = (
        np.isfinite(out["lat"])
        & np.isfinite(out["lon"])
        & (out["lat"] != 0)
        & (out["lon"] != 0)
        & out["timestamp"].notna()
    )
    out = out[usable]
    if out.empty:
        raise NoValidTelemetry(total)
    if int(swap.sum()):
        logger.debug("telemetry_coordinates_swapped", rows=int(swap.sum()))
    return out


def prepare_telemetry(
    raw: pd.DataFrame | Sequence[Mapping[str, object]],
    *,
    departure: object = None,
    arrival: object = None,
    dayfirst: bool = False,
    timestamp_format: str | None = None,
) -> list[TelemetrySample]:
    """Clean, window, sort and annotate telemetry with headings.

    The window ``[departure, arrival]`` is inclusive and either bound may be
    omitted. Raises :class:`InvalidTimeWindow` before any filtering when
    arrival is not after departure, and :class:`EmptyTimeWindow` (with the
    available range) when the window excludes every sample. A bound that is
    given but cannot be parsed is also an :class:`InvalidTimeWindow`.
    """

    dep, arr = _window_bounds(departure, arrival, dayfirst=dayfirst)
    df = clean_telemetry(raw, dayfirst=dayfirst, timestamp_format=timestamp_format)

    if dep is not None or arr is not None:
        mask = pd.Series(True, index=df.index)
        if dep is not None:
            mask &= df["timestamp"] >= dep
        if arr is not None:
            mask &= df["timestamp"] <= arr
        windowed = df[mask]
        if windowed.empty:
            raise EmptyTimeWindow(dep, arr, df["timestamp"].min(), df["timestamp"].max())
        logger.info(
            "time_window_applied",
            kept=len(windowed),
            dropped=len(df) - len(windowed),
        )
        df = windowed

    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
    lat = df["lat"].tolist()
    lon = df["lon"].tolist()
    headings = compute_headings(lat, lon)

    samples = [
        TelemetrySample(
            index=i,
            lat=lat[i],
            lon=lon[i],
            speed_kmph=int(speed),
            timestamp=ts,
            timestamp_text=text,
            heading=headings[i],
        )
        for i, (speed, ts, text) in enumerate(
            zip(df["speed_kmph"], df["timestamp"], df["timestamp_text"])
        )
    ]
    logger.info("telemetry_prepared", samples=len(samples))
    return samples


__all__ = [
    "HEADING_MIN_DISPLACEMENT_M",
    "clean_telemetry",
    "compute_headings",
    "prepare_telemetry",
]
