from __future__ import annotations

from rtis_audit.analysis.models import (
    AnalysisSummary,
    BrakeTestResult,
    BrakeTestStatus,
    BrakeTestType,
    HaltApproachViolation,
    MatchedPoint,
    PointStatus,
    Stoppage,
    TrainType,
    ValidSection,
)
from rtis_audit.analysis.summary import render_summary_markdown
from rtis_audit.data.schemas import AssetKind
from rtis_audit.reporting import RESULT_COLUMNS, results_to_frame, summary_to_dict


def _summary(**overrides) -> AnalysisSummary:
    fields = dict(
        total_structures=3,
        matched_structures=2,
        unmatched_structures=1,
        match_rate=66.67,
        avg_speed=55.5,
        max_speed=80.0,
        min_speed=0.0,
        violation_count=0,
        warning_count=1,
        config_mps=110.0,
        train_type=TrainType.GOODS,
        valid_section=ValidSection(4, 90),
    )
    fields.update(overrides)
    return AnalysisSummary(**fields)


def test_results_frame_columns_and_values() -> None:
    point = MatchedPoint(
        location="962/0",
        lat=21.0,
        lon=79.0,
        timestamp="2024-01-01 08:00:00",
        speed_kmph=64.0,
        limit_applied_kmph=60.0,
        status=PointStatus.VIOLATION,
        matched=True,
        source=AssetKind.OHE,
        chainage_m=962_000.0,
        telemetry_index=3,
        distance_m=2.5,
    )

    df = results_to_frame([point])

    assert list(df.columns) == RESULT_COLUMNS
    assert df.loc[0, "status"] == "violation"
    assert df.loc[0, "source"] == "OHE"


def test_empty_results_frame_keeps_columns() -> None:
    df = results_to_frame([])

    assert list(df.columns) == RESULT_COLUMNS
    assert df.empty


def test_summary_dict_flattens_valid_section() -> None:
    payload = summary_to_dict(_summary())

    assert payload["valid_section_start"] == 4
    assert payload["valid_section_end"] == 90
    assert "valid_section" not in payload
    assert payload["train_type"] == "goods"


def test_markdown_lists_brake_tests_stops_and_halts() -> None:
    summary = _summary(
        brake_tests=[
            BrakeTestResult(
                type=BrakeTestType.BPT,
                status=BrakeTestStatus.IMPROPER,
                start_speed=65.0,
                lowest_speed=65.0,
                drop_amount=0.0,
                location="962/7",
                timestamp="2024-01-01 08:03:00",
            )
        ],
        stoppages=[
            Stoppage(
                location="S-16 Home",
                lat=21.0,
                lon=79.0,
                arrival_time="2024-01-01 08:10:00",
                departure_time="2024-01-01 08:12:00",
                duration_min=2.0,
                is_signal=True,
            )
        ],
        halt_approach_violations=[
            HaltApproachViolation(
                halt_location="S-16 Home",
                checkpoint="Prev Signal (S-14)",
                limit_kmph=60.0,
                actual_speed_kmph=72.0,
                timestamp="2024-01-01 08:08:00",
            )
        ],
    )

    text = render_summary_markdown(summary)

    assert "**PASS**" in text
    assert "| BPT | improper | 65 | 65 | 962/7 | 2024-01-01 08:03:00 |" in text
    assert "| S-16 Home | yes | 2024-01-01 08:10:00 | 2024-01-01 08:12:00 | 2.00 |" in text
    assert "## Halt approach violations" in text
    assert "- **S-16 Home** - Prev Signal (S-14): 72 km/h (limit 60)" in text
    assert text.isascii()


def test_markdown_without_detector_output() -> None:
    text = render_summary_markdown(_summary(violation_count=2))

    assert "**FAIL**" in text
    assert "No brake test context detected." in text
    assert "No stoppages longer than 30 s." in text
    assert "Halt approach" not in text
