"""Name telemetry positions after the closest catalogued asset."""

from __future__ import annotations

from typing import Sequence

from rtis_audit.utils.geo import distance_m

from .models import MatchedPoint

DEFAULT_NAMING_RADIUS_M = 1000.0


def nearest_point(
    points: Sequence[MatchedPoint],
    lat: float,
    lon: float,
    max_distance_m: float,
) -> MatchedPoint | None:
    """Closest asset strictly within *max_distance_m*, matched or not."""

    best: MatchedPoint | None = None
    best_dist = float("inf")
    for point in points:
        dist = distance_m(lat, lon, point.lat, point.lon)
        if dist < max_distance_m and dist < best_dist:
            best, best_dist = point, dist
    return best


class AssetLocator:
    def __init__(
        self,
        points: Sequence[MatchedPoint],
        radius_m: float = DEFAULT_NAMING_RADIUS_M,
    ) -> None:
        self.points = points
        self.radius_m = radius_m

    def name_near(self, lat: float, lon: float, default: str = "Unknown") -> str:
        point = nearest_point(self.points, lat, lon, self.radius_m)
        return point.location if point is not None else default


__all__ = ["AssetLocator", "DEFAULT_NAMING_RADIUS_M", "nearest_point"]
