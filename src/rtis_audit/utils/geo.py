"""Spherical-earth geodesy helpers used by matching and projection."""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0

# Segment bearing may differ from the train heading by at most this much
# before a projection is rejected as belonging to an adjacent track.
MAX_HEADING_DIFF_DEG = 45.0
PROJECTION_T_MIN = -0.1
PROJECTION_T_MAX = 1.1


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance between two WGS84 coordinates in metres."""

    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the initial bearing from point 1 to point 2 in ``[0, 360)``."""

    p1, p2 = math.radians(lat1), math.radians(lat2)
    dlmb = math.radians(lon2 - lon1)
    y = math.sin(dlmb) * math.cos(p2)
    x = math.cos(p1) * math.sin(p2) - math.sin(p1) * math.cos(p2) * math.cos(dlmb)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def heading_difference(a: float, b: float) -> float:
    """Smallest absolute angle between two headings, in degrees."""

    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def project_onto_segment(
    p_lat: float,
    p_lon: float,
    p_heading: float,
    a_lat: float,
    a_lon: float,
    a_chainage: float,
    b_lat: float,
    b_lon: float,
) -> float | None:
    """Project P onto the line A→B and return the chainage at the foot point.

    Returns ``None`` when the segment runs more than 45° off ``p_heading``,
    when A and B coincide, or when the projection parameter falls outside
    ``[-0.1, 1.1]``. The parameter is computed on raw lat/lon deltas; the
    chainage offset uses the haversine length of the segment.
    """

    seg_bearing = bearing_deg(a_lat, a_lon, b_lat, b_lon)
    if heading_difference(seg_bearing, p_heading) > MAX_HEADING_DIFF_DEG:
        return None

    ab_x, ab_y = b_lat - a_lat, b_lon - a_lon
    ap_x, ap_y = p_lat - a_lat, p_lon - a_lon
    len_sq = ab_x * ab_x + ab_y * ab_y
    if len_sq == 0:
        return None

    t = (ap_x * ab_x + ap_y * ab_y) / len_sq
    if t < PROJECTION_T_MIN or t > PROJECTION_T_MAX:
        return None

    return a_chainage + t * distance_m(a_lat, a_lon, b_lat, b_lon)


__all__ = [
    "EARTH_RADIUS_M",
    "bearing_deg",
    "distance_m",
    "heading_difference",
    "project_onto_segment",
]
