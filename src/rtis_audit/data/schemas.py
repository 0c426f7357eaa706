"""Schemas for telemetry, trackside assets and operator input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Header candidates, matched case-insensitively and with non-letters stripped.
TELEMETRY_COLUMNS: Mapping[str, tuple[str, ...]] = {
    "lat": ("Latitude", "lat", "gps_lat"),
    "lon": ("Longitude", "lon", "long", "gps_long"),
    "timestamp": ("Logging Time", "LoggingTime", "timestamp", "date", "time"),
    "speed_kmph": ("Speed", "speed", "speed_kmph", "velocity"),
}
ASSET_COORD_COLUMNS: Mapping[str, tuple[str, ...]] = {
    "lat": ("Latitude", "latitude", "lat", "gps_lat", "y"),
    "lon": ("Longitude", "longitude", "lon", "long", "gps_long", "x"),
}
OHE_LABEL_COLUMNS = ("OHEMas", "OHE", "pole", "Signal", "Name", "Station", "Label", "Asset")
OHE_LABEL_FALLBACK = "Location"
SIGNAL_LABEL_COLUMNS = ("Signal", "Name", "Label", "Station")
SIGNAL_LABEL_FALLBACK = "Signal"


class AssetKind(str, Enum):
    """Trackside reference asset catalogue a row came from."""

    OHE = "OHE"
    SIGNAL = "Signal"


@dataclass(frozen=True, slots=True)
class TelemetrySample:
    """One cleaned, time-ordered GPS fix of the trip."""

    index: int
    lat: float
    lon: float
    speed_kmph: int
    timestamp: pd.Timestamp
    timestamp_text: str
    heading: float = 0.0


@dataclass(frozen=True, slots=True)
class ReferenceAsset:
    """An OHE mast or signal with a known position."""

    label: str
    lat: float
    lon: float
    kind: AssetKind = AssetKind.OHE


class CautionOrder(BaseModel):
    """Temporary speed restriction between two asset labels, either direction."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_label: str = Field(alias="startOhe", description="Label of one end of the order")
    end_label: str = Field(alias="endOhe", description="Label of the other end")
    speed_limit_kmph: float = Field(alias="speedLimit", gt=0)

    @field_validator("start_label", "end_label")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Caution order labels must not be empty")
        return v


__all__ = [
    "ASSET_COORD_COLUMNS",
    "AssetKind",
    "CautionOrder",
    "OHE_LABEL_COLUMNS",
    "OHE_LABEL_FALLBACK",
    "ReferenceAsset",
    "SIGNAL_LABEL_COLUMNS",
    "SIGNAL_LABEL_FALLBACK",
    "TELEMETRY_COLUMNS",
    "TelemetrySample",
]
