"""JSON analysis endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rtis_audit.analysis.engine import AnalysisEngine
from rtis_audit.analysis.models import AnalysisResult
from rtis_audit.analysis.rules import load_rules
from rtis_audit.data.schemas import AssetKind
from rtis_audit.data.ingestion.asset_reader import AssetReader
from rtis_audit.errors import AnalysisInputError
from rtis_audit.reporting.tables import result_to_payload, results_to_csv

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    """Already-parsed rows for each source file plus the analysis settings."""

    model_config = ConfigDict(extra="ignore")

    telemetry: List[Dict[str, Any]] = Field(description="RTIS rows")
    ohe: List[Dict[str, Any]] = Field(default_factory=list, description="OHE mast catalogue rows")
    signals: List[Dict[str, Any]] = Field(default_factory=list, description="Signal catalogue rows")
    config: Dict[str, Any] = Field(default_factory=dict, description="AnalysisRules mapping")


def _error(kind: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": kind, "detail": detail})


def _run(request: AnalyzeRequest) -> AnalysisResult | JSONResponse:
    try:
        rules = load_rules(request.config)
    except (ValidationError, ValueError, TypeError) as exc:
        return _error("InvalidConfiguration", str(exc))

    try:
        ohe = AssetReader.from_records(request.ohe, AssetKind.OHE)
        signals = AssetReader.from_records(request.signals, AssetKind.SIGNAL)
        return AnalysisEngine(rules).analyze(request.telemetry, ohe, signals)
    except AnalysisInputError as exc:
        logger.info("analysis_rejected", kind=exc.kind, detail=str(exc))
        return _error(exc.kind, str(exc))


@router.post("")
def analyze_trip(request: AnalyzeRequest) -> JSONResponse:
    """Return ``{summary, results, signals, summary_md}`` for one trip."""

    outcome = _run(request)
    if isinstance(outcome, JSONResponse):
        return outcome
    return JSONResponse(result_to_payload(outcome))


@router.post("/results.csv")
def analyze_trip_csv(request: AnalyzeRequest) -> Response:
    """Return the per-asset result table as CSV."""

    outcome = _run(request)
    if isinstance(outcome, JSONResponse):
        return outcome
    return Response(
        content=results_to_csv(outcome.results),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="results.csv"'},
    )


__all__ = ["AnalyzeRequest", "router"]
