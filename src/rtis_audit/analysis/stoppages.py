"""Stoppage detection and halt-approach speed checks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Any, Mapping, Optional, Sequence

import structlog

from rtis_audit.data.schemas import TelemetrySample
from rtis_audit.utils.geo import distance_m

from .locate import DEFAULT_NAMING_RADIUS_M, nearest_point
from .models import HaltApproachViolation, MatchedPoint, Stoppage

logger = structlog.get_logger(__name__)

MIN_STOP_DURATION_S = 30.0
SIGNAL_STOP_RADIUS_M = 200.0


@dataclass(frozen=True)
class HaltApproachLimits:
    """Speed checkpoints on the approach to a signal the train halts at."""

    approach_kmph: float = 15.0
    approach_radius_m: float = 100.0
    prev_signal_kmph: float = 60.0
    second_prev_signal_kmph: float = 100.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "HaltApproachLimits":
        config = config or {}
        defaults = cls()
        return cls(
            approach_kmph=float(config.get("approach_kmph", defaults.approach_kmph)),
            approach_radius_m=float(config.get("approach_radius_m", defaults.approach_radius_m)),
            prev_signal_kmph=float(config.get("prev_signal_kmph", defaults.prev_signal_kmph)),
            second_prev_signal_kmph=float(
                config.get("second_prev_signal_kmph", defaults.second_prev_signal_kmph)
            ),
        )


class StopPhase(str, Enum):
    IDLE = "idle"
    IN_STOP = "in_stop"


@dataclass(frozen=True)
class StopState:
    """Fold state: current phase, open run start and closed ``(arrival, departure)`` runs."""

    phase: StopPhase = StopPhase.IDLE
    run_start: Optional[int] = None
    runs: tuple[tuple[int, int], ...] = ()


def stop_step(state: StopState, position: int, sample: TelemetrySample) -> StopState:
    if sample.speed_kmph == 0:
        if state.phase is StopPhase.IDLE:
            return replace(state, phase=StopPhase.IN_STOP, run_start=position)
        return state
    if state.phase is StopPhase.IN_STOP:
        return StopState(runs=state.runs + ((state.run_start, position),))
    return state


def zero_speed_runs(section: Sequence[TelemetrySample]) -> list[tuple[int, int]]:
    """Positions of each zero-speed run and of the sample that ends it.

    A run still open at the end of the section ends at the last sample.
    """

    state = reduce(
        lambda st, item: stop_step(st, item[0], item[1]),
        enumerate(section),
        StopState(),
    )
    runs = list(state.runs)
    if state.phase is StopPhase.IN_STOP and state.run_start is not None:
        runs.append((state.run_start, len(section) - 1))
    return runs


def _stop_location(
    sample: TelemetrySample,
    signal_points: Sequence[MatchedPoint],
    ohe_points: Sequence[MatchedPoint],
) -> tuple[str, bool]:
    signal = nearest_point(signal_points, sample.lat, sample.lon, SIGNAL_STOP_RADIUS_M)
    if signal is not None:
        return signal.location, True
    ohe = nearest_point(ohe_points, sample.lat, sample.lon, DEFAULT_NAMING_RADIUS_M)
    if ohe is not None:
        return ohe.location, False
    return f"Lat:{sample.lat:.4f}, Lon:{sample.lon:.4f}", False


def detect_stoppages(
    section: Sequence[TelemetrySample],
    signal_points: Sequence[MatchedPoint] = (),
    ohe_points: Sequence[MatchedPoint] = (),
) -> list[Stoppage]:
    """Zero-speed runs lasting more than 30 seconds."""

    stoppages: list[Stoppage] = []
    for start, end in zero_speed_runs(section):
        arrival, departure = section[start], section[end]
        seconds = (departure.timestamp - arrival.timestamp).total_seconds()
        if seconds <= MIN_STOP_DURATION_S:
            continue
        location, is_signal = _stop_location(arrival, signal_points, ohe_points)
        stoppages.append(
            Stoppage(
                location=location,
                lat=arrival.lat,
                lon=arrival.lon,
                arrival_time=arrival.timestamp_text,
                departure_time=departure.timestamp_text,
                duration_min=round(seconds / 60.0, 2),
                is_signal=is_signal,
                telemetry_index=arrival.index,
            )
        )
    logger.info(
        "stoppages_detected",
        count=len(stoppages),
        signal_stops=sum(1 for s in stoppages if s.is_signal),
    )
    return stoppages


def signal_history(signal_points: Sequence[MatchedPoint]) -> list[MatchedPoint]:
    """Matched signals in the order the train passed them."""

    passed = [p for p in signal_points if p.matched and p.telemetry_index is not None]
    return sorted(passed, key=lambda p: p.telemetry_index)


def _approach_violation(
    stop: Stoppage,
    section: Sequence[TelemetrySample],
    limits: HaltApproachLimits,
) -> HaltApproachViolation | None:
    stop_position = stop.telemetry_index - section[0].index
    for position in range(stop_position - 1, -1, -1):
        sample = section[position]
        if distance_m(stop.lat, stop.lon, sample.lat, sample.lon) > limits.approach_radius_m:
            break
        if sample.speed_kmph > limits.approach_kmph:
            return HaltApproachViolation(
                halt_location=stop.location,
                checkpoint=f"{limits.approach_radius_m:g}m Approach",
                limit_kmph=limits.approach_kmph,
                actual_speed_kmph=float(sample.speed_kmph),
                timestamp=sample.timestamp_text,
            )
    return None


def _history_violations(
    stop: Stoppage,
    history: Sequence[MatchedPoint],
    limits: HaltApproachLimits,
) -> list[HaltApproachViolation]:
    current: int | None = None
    for position, entry in enumerate(history):
        if entry.telemetry_index > stop.telemetry_index:
            break
        if entry.location == stop.location:
            current = position
    if current is None:
        return []

    checks = (
        (1, "Prev Signal", limits.prev_signal_kmph),
        (2, "2nd Prev Signal", limits.second_prev_signal_kmph),
    )
    violations: list[HaltApproachViolation] = []
    for back, label, limit in checks:
        if current - back < 0:
            continue
        entry = history[current - back]
        speed = entry.speed_kmph or 0.0
        if speed > limit:
            violations.append(
                HaltApproachViolation(
                    halt_location=stop.location,
                    checkpoint=f"{label} ({entry.location})",
                    limit_kmph=limit,
                    actual_speed_kmph=float(round(speed)),
                    timestamp=entry.timestamp,
                )
            )
    return violations


def detect_halt_approach_violations(
    stoppages: Sequence[Stoppage],
    section: Sequence[TelemetrySample],
    signal_points: Sequence[MatchedPoint],
    limits: HaltApproachLimits = HaltApproachLimits(),
) -> list[HaltApproachViolation]:
    """Check approach speeds for every stop made at a signal."""

    if not section:
        return []
    history = signal_history(signal_points)
    violations: list[HaltApproachViolation] = []
    for stop in stoppages:
        if not stop.is_signal:
            continue
        approach = _approach_violation(stop, section, limits)
        if approach is not None:
            violations.append(approach)
        violations.extend(_history_violations(stop, history, limits))
    return violations


__all__ = [
    "HaltApproachLimits",
    "MIN_STOP_DURATION_S",
    "StopPhase",
    "StopState",
    "detect_halt_approach_violations",
    "detect_stoppages",
    "signal_history",
    "stop_step",
    "zero_speed_runs",
]
