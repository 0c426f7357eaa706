"""Tabular and JSON views of an analysis, for report and chart renderers."""

from __future__ import annotations

from typing import Any, Dict, Sequence

import pandas as pd

from rtis_audit.analysis.models import AnalysisResult, AnalysisSummary, MatchedPoint, to_dict

RESULT_COLUMNS = [
    "location",
    "source",
    "matched",
    "lat",
    "lon",
    "timestamp",
    "chainage_m",
    "speed_kmph",
    "limit_applied_kmph",
    "status",
    "distance_m",
]


def results_to_frame(points: Sequence[MatchedPoint]) -> pd.DataFrame:
    """One row per asset with the columns in :data:`RESULT_COLUMNS`."""

    if not points:
        return pd.DataFrame({col: pd.Series(dtype="object") for col in RESULT_COLUMNS})
    rows = [to_dict(point) for point in points]
    return pd.DataFrame(rows)[RESULT_COLUMNS]


def results_to_csv(points: Sequence[MatchedPoint]) -> str:
    return results_to_frame(points).to_csv(index=False)


def summary_to_dict(summary: AnalysisSummary) -> Dict[str, Any]:
    payload = to_dict(summary)
    section = payload.pop("valid_section")
    payload["valid_section_start"] = section["start"]
    payload["valid_section_end"] = section["end"]
    return payload


def result_to_payload(result: AnalysisResult) -> Dict[str, Any]:
    """JSON-ready ``{summary, results, signals, summary_md}`` mapping."""

    return {
        "summary": summary_to_dict(result.summary),
        "results": [to_dict(p) for p in result.results],
        "signals": [to_dict(p) for p in result.signals],
        "summary_md": result.summary_md,
    }


__all__ = [
    "RESULT_COLUMNS",
    "result_to_payload",
    "results_to_csv",
    "results_to_frame",
    "summary_to_dict",
]
