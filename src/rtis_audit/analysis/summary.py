"""Roll-up of per-asset results and detector output for one trip."""

from __future__ import annotations

from typing import Sequence

from rtis_audit.data.schemas import TelemetrySample

from .models import (
    AnalysisSummary,
    BrakeTestResult,
    HaltApproachViolation,
    MatchedPoint,
    PointStatus,
    Stoppage,
    TrainType,
    ValidSection,
)


def build_summary(
    results: Sequence[MatchedPoint],
    section: Sequence[TelemetrySample],
    *,
    config_mps: float,
    train_type: TrainType,
    valid_section: ValidSection,
    stoppages: Sequence[Stoppage] = (),
    brake_tests: Sequence[BrakeTestResult] = (),
    halt_approach_violations: Sequence[HaltApproachViolation] = (),
) -> AnalysisSummary:
    total = len(results)
    matched = sum(1 for r in results if r.matched)
    speeds = [s.speed_kmph for s in section]

    return AnalysisSummary(
        total_structures=total,
        matched_structures=matched,
        unmatched_structures=total - matched,
        match_rate=(matched / total) * 100.0 if total else 0.0,
        avg_speed=sum(speeds) / len(speeds) if speeds else 0.0,
        max_speed=float(max(speeds)) if speeds else 0.0,
        min_speed=float(min(speeds)) if speeds else 0.0,
        violation_count=sum(1 for r in results if r.status is PointStatus.VIOLATION),
        warning_count=sum(1 for r in results if r.status is PointStatus.WARNING),
        config_mps=float(config_mps),
        train_type=train_type,
        stoppages=list(stoppages),
        brake_tests=list(brake_tests),
        halt_approach_violations=list(halt_approach_violations),
        valid_section=valid_section,
    )


def render_summary_markdown(summary: AnalysisSummary) -> str:
    lines = ["# Trip Analysis Summary"]
    lines.append("")
    status = "PASS" if summary.violation_count == 0 else "FAIL"
    lines.append(f"Overall speed compliance: **{status}**")
    lines.append(
        f"Train type: **{summary.train_type.value}**, MPS: **{summary.config_mps:.0f} km/h**"
    )
    lines.append(
        f"Structures matched: **{summary.matched_structures}/{summary.total_structures}**"
        f" ({summary.match_rate:.1f}%)"
    )
    if summary.valid_section.empty:
        lines.append("Valid section: **none** (no asset matched the trip)")
    else:
        lines.append(
            f"Speed over valid section: min {summary.min_speed:.0f} / "
            f"avg {summary.avg_speed:.1f} / max {summary.max_speed:.0f} km/h"
        )
    lines.append(
        f"Violations: **{summary.violation_count}**, warnings: **{summary.warning_count}**"
    )

    lines.append("")
    lines.append("## Brake tests")
    lines.append("")
    if summary.brake_tests:
        lines.append("| Test | Status | Start (km/h) | Lowest (km/h) | Location | Time |")
        lines.append("| --- | --- | --- | --- | --- | --- |")
        for test in summary.brake_tests:
            lines.append(
                f"| {test.type.value} | {test.status.value} | {test.start_speed:.0f} | "
                f"{test.lowest_speed:.0f} | {test.location} | {test.timestamp} |"
            )
    else:
        lines.append("No brake test context detected.")

    lines.append("")
    lines.append("## Stoppages")
    lines.append("")
    if summary.stoppages:
        lines.append("| Location | Signal | Arrival | Departure | Minutes |")
        lines.append("| --- | --- | --- | --- | --- |")
        for stop in summary.stoppages:
            signal = "yes" if stop.is_signal else "no"
            lines.append(
                f"| {stop.location} | {signal} | {stop.arrival_time} | "
                f"{stop.departure_time} | {stop.duration_min:.2f} |"
            )
    else:
        lines.append("No stoppages longer than 30 s.")

    if summary.halt_approach_violations:
        lines.append("")
        lines.append("## Halt approach violations")
        lines.append("")
        for v in summary.halt_approach_violations:
            lines.append(
                f"- **{v.halt_location}** - {v.checkpoint}: {v.actual_speed_kmph:.0f} km/h "
                f"(limit {v.limit_kmph:.0f}) at {v.timestamp}"
            )

    return "\n".join(lines)


__all__ = ["build_summary", "render_summary_markdown"]
