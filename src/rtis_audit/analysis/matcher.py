"""Match trackside assets to telemetry and project them onto linear chainage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import structlog

from rtis_audit.data.schemas import AssetKind, ReferenceAsset, TelemetrySample
from rtis_audit.spatial.grid import DEFAULT_CELL_DEG, GridIndex
from rtis_audit.utils.chainage import label_to_chainage
from rtis_audit.utils.geo import distance_m, project_onto_segment

from .models import MatchedPoint, PointStatus, ValidSection
from .track import TrackPolyline

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DISTANCE_M = 500.0


@dataclass(slots=True)
class MatchOutcome:
    points: list[MatchedPoint]
    valid_section: ValidSection


def effective_threshold(max_distance_m: float | None) -> float:
    if max_distance_m is None or not max_distance_m > 0:
        return DEFAULT_MAX_DISTANCE_M
    return float(max_distance_m)


def projected_chainage(
    track: TrackPolyline,
    position: int,
    sample: TelemetrySample,
) -> float:
    """Along-track position of *sample* near the asset at *position*.

    Falls back to the asset's label chainage when there is no next asset or
    the projection is rejected.
    """

    asset = track[position]
    own = label_to_chainage(asset.label)
    segment = track.segment_to_next(position)
    if segment is None:
        return own
    a, b = segment
    snapped = project_onto_segment(
        sample.lat, sample.lon, sample.heading, a.lat, a.lon, own, b.lat, b.lon
    )
    return own if snapped is None else snapped


class AssetMatcher:
    """Nearest-sample lookup over a grid index of the trip's telemetry."""

    def __init__(
        self,
        samples: Sequence[TelemetrySample],
        *,
        max_distance_m: float | None = DEFAULT_MAX_DISTANCE_M,
        cell_deg: float = DEFAULT_CELL_DEG,
    ) -> None:
        self.samples = samples
        self.threshold_m = effective_threshold(max_distance_m)
        self.index = GridIndex(cell_deg)
        self.index.extend((s.index, s.lat, s.lon) for s in samples)

    def nearest(self, lat: float, lon: float) -> tuple[TelemetrySample | None, float]:
        best: TelemetrySample | None = None
        best_dist = float("inf")
        for idx in self.index.query_neighborhood(lat, lon):
            sample = self.samples[idx]
            dist = distance_m(lat, lon, sample.lat, sample.lon)
            if dist < best_dist:
                best, best_dist = sample, dist
        return best, best_dist

    def match_one(self, track: TrackPolyline, position: int) -> tuple[MatchedPoint, ValidSection]:
        asset = track[position]
        sample, dist = self.nearest(asset.lat, asset.lon)
        is_ohe = asset.kind is AssetKind.OHE

        if sample is None or dist > self.threshold_m:
            return (
                MatchedPoint(
                    location=asset.label,
                    lat=asset.lat,
                    lon=asset.lon,
                    timestamp="",
                    speed_kmph=None,
                    limit_applied_kmph=None,
                    status=PointStatus.OK,
                    matched=False,
                    source=asset.kind,
                    chainage_m=label_to_chainage(asset.label) if is_ohe else 0.0,
                ),
                ValidSection(),
            )

        chainage = projected_chainage(track, position, sample) if is_ohe else 0.0
        point = MatchedPoint(
            location=asset.label,
            lat=asset.lat,
            lon=asset.lon,
            timestamp=sample.timestamp_text,
            speed_kmph=float(sample.speed_kmph),
            limit_applied_kmph=None,
            status=PointStatus.OK,
            matched=True,
            source=asset.kind,
            chainage_m=chainage,
            telemetry_index=sample.index,
            distance_m=dist,
        )
        return point, ValidSection.of(sample.index)

    def match(self, assets: Sequence[ReferenceAsset]) -> MatchOutcome:
        """Match every asset in catalogue order.

        The valid section is reduced with :meth:`ValidSection.combine`, which
        does not depend on the order the per-asset results arrive in.
        """

        track = TrackPolyline(assets)
        points: list[MatchedPoint] = []
        section = ValidSection()
        for position in range(len(track)):
            point, partial = self.match_one(track, position)
            points.append(point)
            section = section.combine(partial)

        matched = sum(1 for p in points if p.matched)
        logger.info(
            "assets_matched",
            total=len(points),
            matched=matched,
            threshold_m=self.threshold_m,
        )
        return MatchOutcome(points=points, valid_section=section)


__all__ = [
    "DEFAULT_MAX_DISTANCE_M",
    "AssetMatcher",
    "MatchOutcome",
    "effective_threshold",
    "projected_chainage",
]
