"""Utilities to ingest RTIS telemetry logs into a column-resolved DataFrame."""

from __future__ import annotations

import csv
import io
from typing import Mapping, Sequence

import pandas as pd

from rtis_audit.data.schemas import TELEMETRY_COLUMNS

from .columns import resolve_columns

ORDERED = ["lat", "lon", "speed_kmph", "timestamp"]


def read_telemetry_csv(text: str) -> list[dict[str, str]]:
    """Return raw telemetry rows parsed from CSV *text*, headers stripped."""

    if not text or not text.strip():
        return []

    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    return [
        {str(k).strip(): v for k, v in row.items() if k is not None}
        for row in reader
        if any((v or "").strip() for v in row.values() if isinstance(v, str))
    ]


class TelemetryReader:
    """RTIS ingestion: CSV/rows/DataFrame -> ``lat, lon, speed_kmph, timestamp``.

    Values are left as found in the source (strings stay strings); cleaning
    and typing happen in :mod:`rtis_audit.data.preparation`.
    """

    @staticmethod
    def from_csv(path: str, mapping: Mapping[str, str] | None = None) -> pd.DataFrame:
        """Load a CSV file, resolving columns by header name unless *mapping* is given."""

        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return TelemetryReader.from_frame(df, mapping=mapping)

    @staticmethod
    def from_text(text: str, mapping: Mapping[str, str] | None = None) -> pd.DataFrame:
        return TelemetryReader.from_records(read_telemetry_csv(text), mapping=mapping)

    @staticmethod
    def from_records(
        rows: Sequence[Mapping[str, object]],
        mapping: Mapping[str, str] | None = None,
    ) -> pd.DataFrame:
        return TelemetryReader.from_frame(pd.DataFrame(list(rows)), mapping=mapping)

    @staticmethod
    def from_frame(df: pd.DataFrame, mapping: Mapping[str, str] | None = None) -> pd.DataFrame:
        """Resolve the four required telemetry columns of *df*.

        *mapping* maps canonical names (``lat``, ``lon``, ``speed_kmph``,
        ``timestamp``) to source headers and bypasses the header heuristics
        for the names it covers.
        """

        df = df.rename(columns=lambda c: str(c).strip())
        candidates = {
            canonical: ((mapping[canonical],) if mapping and canonical in mapping else names)
            for canonical, names in TELEMETRY_COLUMNS.items()
        }
        resolved = resolve_columns(df, candidates, source="Telemetry")
        out = pd.DataFrame({canonical: df[column] for canonical, column in resolved.items()})
        return out[ORDERED].reset_index(drop=True)


__all__ = ["ORDERED", "TelemetryReader", "read_telemetry_csv"]
