"""Data layer: schemas, ingestion and telemetry preparation."""

from .ingestion import AssetReader, TelemetryReader, read_telemetry_csv
from .preparation import clean_telemetry, compute_headings, prepare_telemetry
from .schemas import AssetKind, CautionOrder, ReferenceAsset, TelemetrySample

__all__ = [
    "AssetKind",
    "AssetReader",
    "CautionOrder",
    "ReferenceAsset",
    "TelemetryReader",
    "TelemetrySample",
    "clean_telemetry",
    "compute_headings",
    "prepare_telemetry",
    "read_telemetry_csv",
]
