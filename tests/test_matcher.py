from __future__ import annotations

import pandas as pd
import pytest

from rtis_audit.analysis.matcher import AssetMatcher, effective_threshold, projected_chainage
from rtis_audit.analysis.models import PointStatus, ValidSection
from rtis_audit.analysis.track import ChainageMap, FallbackFromLabel, Resolved, TrackPolyline
from rtis_audit.data.schemas import AssetKind, ReferenceAsset, TelemetrySample


def _northbound(n: int, *, step_deg: float = 0.0003, speed: int = 80) -> list[TelemetrySample]:
    base = pd.Timestamp("2024-01-01T08:00:00Z")
    samples = []
    for i in range(n):
        ts = base + pd.Timedelta(seconds=i)
        samples.append(
            TelemetrySample(
                index=i,
                lat=21.0 + i * step_deg,
                lon=79.0,
                speed_kmph=speed,
                timestamp=ts,
                timestamp_text=ts.strftime("%Y-%m-%d %H:%M:%S"),
                heading=0.0,
            )
        )
    return samples


def _masts(count: int, *, spacing_deg: float = 0.0006, offset_deg: float = 0.00003) -> list[ReferenceAsset]:
    return [
        ReferenceAsset(f"962/{k}", 21.0 + k * spacing_deg, 79.0 + offset_deg, AssetKind.OHE)
        for k in range(count)
    ]


@pytest.mark.parametrize("value, expected", [(None, 500.0), (0, 500.0), (-5, 500.0), (50, 50.0)])
def test_effective_threshold(value, expected) -> None:
    assert effective_threshold(value) == expected


def test_asset_is_matched_to_nearest_sample() -> None:
    samples = _northbound(20)
    asset = ReferenceAsset("962/0", 21.0 + 7 * 0.0003 + 0.00001, 79.0)

    outcome = AssetMatcher(samples).match([asset])

    point = outcome.points[0]
    assert point.matched
    assert point.telemetry_index == 7
    assert point.speed_kmph == 80.0
    assert point.timestamp == "2024-01-01 08:00:07"
    assert point.distance_m == pytest.approx(1.11, abs=0.05)
    assert point.status is PointStatus.OK
    assert outcome.valid_section == ValidSection(7, 7)


def test_asset_beyond_threshold_is_unmatched() -> None:
    samples = _northbound(20)
    far = ReferenceAsset("975/3", 21.1, 79.0)

    outcome = AssetMatcher(samples, max_distance_m=50).match([far])

    point = outcome.points[0]
    assert not point.matched
    assert point.timestamp == ""
    assert point.speed_kmph is None
    assert point.limit_applied_kmph is None
    assert point.telemetry_index is None
    assert point.chainage_m == 975_180.0
    assert outcome.valid_section.empty


def test_threshold_applies_even_inside_the_neighbourhood() -> None:
    samples = _northbound(3)
    beside = ReferenceAsset("962/0", 21.0, 79.001)  # about 104 m east

    assert not AssetMatcher(samples, max_distance_m=50).match([beside]).points[0].matched
    assert AssetMatcher(samples, max_distance_m=150).match([beside]).points[0].matched


def test_results_follow_catalogue_order_and_valid_section_spans_matches() -> None:
    samples = _northbound(40)
    assets = [
        ReferenceAsset("962/2", 21.0 + 30 * 0.0003, 79.0),
        ReferenceAsset("962/1", 21.0 + 5 * 0.0003, 79.0),
        ReferenceAsset("999/0", 25.0, 79.0),
    ]

    outcome = AssetMatcher(samples).match(assets)

    assert [p.location for p in outcome.points] == ["962/2", "962/1", "999/0"]
    assert outcome.valid_section == ValidSection(5, 30)


def test_projected_chainage_is_monotonic_along_the_route() -> None:
    samples = _northbound(60)
    masts = _masts(15)

    points = AssetMatcher(samples).match(masts).points

    chainages = [p.chainage_m for p in points]
    assert all(p.matched for p in points)
    assert chainages == sorted(chainages)
    assert chainages[0] == pytest.approx(962_000.0, abs=1.0)
    # Last mast has no outgoing segment and keeps its label chainage.
    assert chainages[-1] == 962_000.0 + 14 * 60.0


def test_projection_rejected_for_opposite_heading_uses_label() -> None:
    masts = _masts(2)
    sample = _northbound(1)[0]
    reversed_sample = TelemetrySample(
        index=0,
        lat=sample.lat,
        lon=sample.lon,
        speed_kmph=50,
        timestamp=sample.timestamp,
        timestamp_text=sample.timestamp_text,
        heading=180.0,
    )

    assert projected_chainage(TrackPolyline(masts), 0, reversed_sample) == 962_000.0


def test_signals_carry_no_chainage() -> None:
    samples = _northbound(10)
    signal = ReferenceAsset("962/5", 21.0 + 3 * 0.0003, 79.0, AssetKind.SIGNAL)

    point = AssetMatcher(samples).match([signal]).points[0]

    assert point.matched
    assert point.source is AssetKind.SIGNAL
    assert point.chainage_m == 0.0


def test_matching_is_deterministic() -> None:
    samples = _northbound(30)
    masts = _masts(8)

    first = AssetMatcher(samples).match(masts)
    second = AssetMatcher(samples).match(masts)

    assert first.points == second.points
    assert first.valid_section == second.valid_section


def test_valid_section_combine_is_order_independent() -> None:
    parts = [ValidSection.of(9), ValidSection(), ValidSection(3, 4), ValidSection.of(12)]

    forward = ValidSection()
    for part in parts:
        forward = forward.combine(part)
    backward = ValidSection()
    for part in reversed(parts):
        backward = part.combine(backward)

    assert forward == backward == ValidSection(3, 12)


def test_chainage_map_first_label_wins_and_falls_back() -> None:
    assets = [
        ReferenceAsset("962/0", 21.0, 79.0),
        ReferenceAsset("962/1", 21.0006, 79.0),
        ReferenceAsset("962/0", 21.5, 79.0),
    ]

    chainages = ChainageMap(assets)

    assert len(chainages) == 2
    assert "962/1" in chainages
    assert chainages.resolve(" 962/1 ") == Resolved(962_060.0)
    assert chainages.resolve("970/5") == FallbackFromLabel(970_300.0)
    assert not hasattr(chainages, "as_mapping")


def test_track_polyline_segments() -> None:
    track = TrackPolyline(_masts(3))

    assert len(track) == 3
    assert track.segment_to_next(0) == (track[0], track[1])
    assert track.segment_to_next(2) is None
    assert [a.label for a in track] == ["962/0", "962/1", "962/2"]
