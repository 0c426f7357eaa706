"""Trip analysis entry point: telemetry + catalogues -> compliance report."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Union

import pandas as pd
import structlog

from rtis_audit.data.ingestion.asset_reader import AssetReader
from rtis_audit.data.preparation import prepare_telemetry
from rtis_audit.data.schemas import AssetKind, CautionOrder, ReferenceAsset

from .brake_tests import detect_brake_tests
from .caution import resolve_zones
from .classifier import apply_speed_limits
from .locate import AssetLocator
from .matcher import AssetMatcher
from .models import AnalysisResult, MatchedPoint
from .rules import AnalysisRules, load_rules
from .stoppages import detect_halt_approach_violations, detect_stoppages
from .summary import build_summary, render_summary_markdown
from .track import TrackPolyline

logger = structlog.get_logger(__name__)

AssetSource = Union[pd.DataFrame, Sequence[ReferenceAsset], Sequence[Mapping[str, Any]], None]
TelemetrySource = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


def _as_assets(source: AssetSource, kind: AssetKind) -> list[ReferenceAsset]:
    if source is None:
        return []
    if isinstance(source, pd.DataFrame):
        return AssetReader.from_frame(source, kind)
    items = list(source)
    if not items:
        return []
    if all(isinstance(item, ReferenceAsset) for item in items):
        return [
            item if item.kind is kind else ReferenceAsset(item.label, item.lat, item.lon, kind)
            for item in items
        ]
    return AssetReader.from_records(items, kind)


def _as_orders(orders: Iterable[CautionOrder | Mapping[str, Any]]) -> list[CautionOrder]:
    return [
        order if isinstance(order, CautionOrder) else CautionOrder.model_validate(order)
        for order in orders
    ]


class AnalysisEngine:
    """Match a trip against trackside assets and run every compliance check."""

    def __init__(self, rules: AnalysisRules | None = None) -> None:
        self.rules = rules or AnalysisRules()

    def analyze(
        self,
        telemetry: TelemetrySource,
        ohe: AssetSource = None,
        signals: AssetSource = None,
        caution_orders: Iterable[CautionOrder | Mapping[str, Any]] | None = None,
    ) -> AnalysisResult:
        """Run the full analysis.

        The OHE catalogue is the master list when present; otherwise the
        signal catalogue takes its place and no chainage or caution-order
        logic applies. Raises :class:`~rtis_audit.errors.AnalysisInputError`
        subclasses for unusable input; everything else degrades to empty or
        unmatched results.
        """

        rules = self.rules
        samples = prepare_telemetry(
            telemetry,
            departure=rules.departure_time,
            arrival=rules.arrival_time,
            dayfirst=rules.dayfirst,
            timestamp_format=rules.timestamp_format,
        )
        ohe_assets = _as_assets(ohe, AssetKind.OHE)
        signal_assets = _as_assets(signals, AssetKind.SIGNAL)
        orders = _as_orders(rules.caution_orders if caution_orders is None else caution_orders)

        matcher = AssetMatcher(
            samples,
            max_distance_m=rules.max_distance_m,
            cell_deg=rules.grid_cell_deg,
        )

        ohe_master = bool(ohe_assets)
        master = ohe_assets if ohe_master else signal_assets
        outcome = matcher.match(master)
        section = outcome.valid_section

        zones = []
        if ohe_master:
            chainages = TrackPolyline(master).chainage_map()
            zones = resolve_zones(orders, chainages, rules.train_length_m)
        results = apply_speed_limits(
            outcome.points, zones, rules.global_mps_kmph, rules.threshold_policy
        )

        signal_results: list[MatchedPoint] = []
        if ohe_master and signal_assets:
            signal_outcome = matcher.match(signal_assets)
            signal_results = signal_outcome.points
            section = section.combine(signal_outcome.valid_section)
        signal_points = signal_results if ohe_master else results
        ohe_points = results if ohe_master else []

        section_samples = section.slice(samples)
        if not section_samples:
            logger.warning("valid_section_empty", samples=len(samples), assets=len(master))

        brake_tests = detect_brake_tests(section_samples, AssetLocator(results))
        stoppages = detect_stoppages(section_samples, signal_points, ohe_points)
        halts = detect_halt_approach_violations(
            stoppages, section_samples, signal_points, rules.halt_approach_limits
        )

        summary = build_summary(
            results,
            section_samples,
            config_mps=rules.global_mps_kmph,
            train_type=rules.train_type,
            valid_section=section,
            stoppages=stoppages,
            brake_tests=brake_tests,
            halt_approach_violations=halts,
        )
        logger.info(
            "analysis_complete",
            structures=summary.total_structures,
            matched=summary.matched_structures,
            violations=summary.violation_count,
            warnings=summary.warning_count,
            stoppages=len(stoppages),
        )
        return AnalysisResult(
            summary=summary,
            results=results,
            signals=signal_results,
            summary_md=render_summary_markdown(summary),
        )


def analyze(
    telemetry: TelemetrySource,
    ohe: AssetSource = None,
    signals: AssetSource = None,
    caution_orders: Iterable[CautionOrder | Mapping[str, Any]] | None = None,
    config: AnalysisRules | Mapping[str, Any] | str | None = None,
) -> AnalysisResult:
    """Convenience wrapper around :class:`AnalysisEngine`."""

    rules = config if isinstance(config, AnalysisRules) else load_rules(config)
    return AnalysisEngine(rules).analyze(telemetry, ohe, signals, caution_orders)


__all__ = ["AnalysisEngine", "analyze"]
