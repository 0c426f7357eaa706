from __future__ import annotations

from typing import Sequence

import pandas as pd

from rtis_audit.analysis.brake_tests import (
    BftPhase,
    BftState,
    bft_step,
    detect_bft,
    detect_bpt,
    detect_brake_tests,
)
from rtis_audit.analysis.locate import AssetLocator
from rtis_audit.analysis.models import BrakeTestStatus, BrakeTestType, MatchedPoint, PointStatus
from rtis_audit.data.schemas import AssetKind, TelemetrySample

METRES_PER_DEG = 111_195.0


def _trip(speeds: Sequence[int], *, lat0: float = 21.0) -> list[TelemetrySample]:
    """1 Hz northbound samples whose positions follow the speed profile."""

    base = pd.Timestamp("2024-01-01T08:00:00Z")
    samples = []
    lat = lat0
    for i, speed in enumerate(speeds):
        ts = base + pd.Timedelta(seconds=i)
        samples.append(
            TelemetrySample(
                index=i,
                lat=lat,
                lon=79.0,
                speed_kmph=speed,
                timestamp=ts,
                timestamp_text=ts.strftime("%Y-%m-%d %H:%M:%S"),
            )
        )
        lat += speed / 3.6 / METRES_PER_DEG
    return samples


def _no_assets() -> AssetLocator:
    return AssetLocator([])


def test_bft_not_performed_when_entering_above_15() -> None:
    result = detect_bft(_trip([20, 25, 30]), _no_assets())

    assert result.type is BrakeTestType.BFT
    assert result.status is BrakeTestStatus.NOT_PERFORMED
    assert result.start_speed == 20.0
    assert result.details == "Entered section at 20 km/h (already running)"


def test_bft_proper_drop() -> None:
    result = detect_bft(_trip([0, 5, 12, 9, 6, 8, 14, 20, 30]), _no_assets())

    assert result.status is BrakeTestStatus.PROPER
    assert result.start_speed == 12.0
    assert result.lowest_speed == 6.0
    assert result.drop_amount == 6.0
    assert result.timestamp == "2024-01-01 08:00:02"


def test_bft_improper_when_15_crossed_first() -> None:
    result = detect_bft(_trip([0, 5, 12, 13, 14, 16, 20]), _no_assets())

    assert result.status is BrakeTestStatus.IMPROPER
    assert result.start_speed == 16.0
    assert result.details == "Speed crossed 15 km/h without valid test"


def test_bft_drop_must_happen_within_20_samples() -> None:
    speeds = [12] * 21 + [6] + [20]

    result = detect_bft(_trip(speeds), _no_assets())

    # The drop at position 21 first falls inside the window starting at position 2.
    assert result.status is BrakeTestStatus.PROPER
    assert result.timestamp == "2024-01-01 08:00:02"


def test_bft_stop_inside_window_counts_as_drop() -> None:
    result = detect_bft(_trip([10, 0, 0, 10, 20]), _no_assets())

    assert result.status is BrakeTestStatus.PROPER
    assert result.lowest_speed == 0.0


def test_bft_none_for_slow_trip_and_empty_section() -> None:
    assert detect_bft(_trip([0, 3, 5, 3, 0]), _no_assets()) is None
    assert detect_bft([], _no_assets()) is None


def test_bft_step_holds_decided_state() -> None:
    section = _trip([20, 12, 5])
    decided = bft_step(BftState(), 0, section, _no_assets())

    assert decided.phase is BftPhase.DECIDED
    assert bft_step(decided, 1, section, _no_assets()) is decided


def test_bpt_proper_half_drop() -> None:
    result = detect_bpt(_trip([0, 30, 60, 70, 50, 34, 40]), _no_assets())

    assert result.type is BrakeTestType.BPT
    assert result.status is BrakeTestStatus.PROPER
    assert result.start_speed == 70.0
    assert result.lowest_speed == 34.0
    assert result.details == "50% drop observed"


def test_bpt_improper_reports_first_candidate() -> None:
    result = detect_bpt(_trip([0, 30, 65, 70, 60, 55]), _no_assets())

    assert result.status is BrakeTestStatus.IMPROPER
    assert result.start_speed == 65.0
    assert result.timestamp == "2024-01-01 08:00:02"
    assert result.details == "Reached 60+ km/h but no 50% drop detected"


def test_bpt_absent_when_60_never_reached() -> None:
    assert detect_bpt(_trip([0, 30, 55, 59, 20]), _no_assets()) is None
    assert detect_bpt([], _no_assets()) is None


def test_bpt_ignores_samples_beyond_15_km() -> None:
    near, far = _trip([0, 80, 30])[0], _trip([80, 30], lat0=21.2)
    section = [near] + [
        TelemetrySample(
            index=i + 1,
            lat=s.lat,
            lon=s.lon,
            speed_kmph=s.speed_kmph,
            timestamp=s.timestamp,
            timestamp_text=s.timestamp_text,
        )
        for i, s in enumerate(far)
    ]

    assert detect_bpt(section, _no_assets()) is None


def test_brake_test_location_is_named_after_nearby_asset() -> None:
    mast = MatchedPoint(
        location="962/4",
        lat=21.0,
        lon=79.0005,
        timestamp="",
        speed_kmph=None,
        limit_applied_kmph=None,
        status=PointStatus.OK,
        matched=False,
        source=AssetKind.OHE,
    )
    section = _trip([20, 70, 30])

    results = detect_brake_tests(section, AssetLocator([mast]))

    assert [(r.type, r.status) for r in results] == [
        (BrakeTestType.BFT, BrakeTestStatus.NOT_PERFORMED),
        (BrakeTestType.BPT, BrakeTestStatus.PROPER),
    ]
    assert results[0].location == "962/4"


def test_brake_test_location_defaults_to_unknown() -> None:
    results = detect_brake_tests(_trip([20, 25]), _no_assets())

    assert results[0].location == "Unknown"
