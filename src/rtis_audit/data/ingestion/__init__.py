"""Ingestion utilities for RTIS telemetry and trackside catalogues."""

from .asset_reader import AssetReader
from .columns import clean_coord, find_column, resolve_columns, swap_if_transposed
from .telemetry_reader import ORDERED as TELEMETRY_ORDERED
from .telemetry_reader import TelemetryReader, read_telemetry_csv

__all__ = [
    "AssetReader",
    "TELEMETRY_ORDERED",
    "TelemetryReader",
    "clean_coord",
    "find_column",
    "read_telemetry_csv",
    "resolve_columns",
    "swap_if_transposed",
]
