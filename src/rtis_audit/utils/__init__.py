"""Utility helpers for the application."""

from .chainage import label_to_chainage
from .geo import bearing_deg, distance_m, heading_difference, project_onto_segment
from .time import is_blank, to_utc_series, to_utc_timestamp

__all__ = [
    "bearing_deg",
    "distance_m",
    "heading_difference",
    "is_blank",
    "label_to_chainage",
    "project_onto_segment",
    "to_utc_series",
    "to_utc_timestamp",
]
