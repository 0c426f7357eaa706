"""Spatial indexing for telemetry lookups."""

from .grid import DEFAULT_CELL_DEG, GridIndex

__all__ = ["DEFAULT_CELL_DEG", "GridIndex"]
