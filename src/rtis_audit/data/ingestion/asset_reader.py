"""Utilities to ingest OHE-mast and signal catalogues."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

import pandas as pd

from rtis_audit.data.schemas import (
    ASSET_COORD_COLUMNS,
    OHE_LABEL_COLUMNS,
    OHE_LABEL_FALLBACK,
    SIGNAL_LABEL_COLUMNS,
    SIGNAL_LABEL_FALLBACK,
    AssetKind,
    ReferenceAsset,
)

from .columns import clean_coord, find_column, resolve_columns, swap_if_transposed
from .telemetry_reader import read_telemetry_csv

_LABEL_CANDIDATES: Mapping[AssetKind, tuple[tuple[str, ...], str]] = {
    AssetKind.OHE: (OHE_LABEL_COLUMNS, OHE_LABEL_FALLBACK),
    AssetKind.SIGNAL: (SIGNAL_LABEL_COLUMNS, SIGNAL_LABEL_FALLBACK),
}


class AssetReader:
    """Catalogue ingestion: CSV/rows/DataFrame -> ordered ``ReferenceAsset`` list.

    Catalogue order is preserved; it defines the track polyline used for
    chainage projection. Rows whose coordinates do not parse are skipped and
    transposed coordinates are swapped back.
    """

    @staticmethod
    def from_csv(path: str, kind: AssetKind = AssetKind.OHE) -> list[ReferenceAsset]:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return AssetReader.from_frame(df, kind)

    @staticmethod
    def from_text(text: str, kind: AssetKind = AssetKind.OHE) -> list[ReferenceAsset]:
        return AssetReader.from_records(read_telemetry_csv(text), kind)

    @staticmethod
    def from_records(
        rows: Sequence[Mapping[str, object]],
        kind: AssetKind = AssetKind.OHE,
    ) -> list[ReferenceAsset]:
        if not rows:
            return []
        return AssetReader.from_frame(pd.DataFrame(list(rows)), kind)

    @staticmethod
    def from_frame(df: pd.DataFrame, kind: AssetKind = AssetKind.OHE) -> list[ReferenceAsset]:
        if df.empty and not len(df.columns):
            return []
        df = df.rename(columns=lambda c: str(c).strip())
        source = f"{kind.value} catalogue"
        coords = resolve_columns(df, ASSET_COORD_COLUMNS, source=source)

        label_names, fallback = _LABEL_CANDIDATES[kind]
        label_col = find_column(df.columns, label_names)
        if label_col is None and fallback in df.columns:
            label_col = fallback

        assets: list[ReferenceAsset] = []
        for row in df.to_dict(orient="records"):
            lat = clean_coord(row.get(coords["lat"]))
            lon = clean_coord(row.get(coords["lon"]))
            if math.isnan(lat) or math.isnan(lon):
                continue
            lat, lon = swap_if_transposed(lat, lon)
            raw_label = row.get(label_col) if label_col is not None else None
            label = "" if raw_label is None or pd.isna(raw_label) else str(raw_label).strip()
            assets.append(
                ReferenceAsset(label=label or "Unknown", lat=lat, lon=lon, kind=kind)
            )
        return assets


__all__ = ["AssetReader"]
