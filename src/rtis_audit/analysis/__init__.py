"""Trip analysis: matching, zones, classification and detectors."""

from .brake_tests import detect_brake_tests
from .caution import CautionZone, limit_at, resolve_zones
from .classifier import ThresholdPolicy, apply_speed_limits, classify_speed
from .engine import AnalysisEngine, analyze
from .matcher import AssetMatcher, MatchOutcome
from .models import (
    AnalysisResult,
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
    to_dict,
)
from .rules import AnalysisRules, load_rules
from .stoppages import HaltApproachLimits, detect_halt_approach_violations, detect_stoppages
from .track import ChainageMap, FallbackFromLabel, Resolved, TrackPolyline

__all__ = [
    "AnalysisEngine",
    "AnalysisResult",
    "AnalysisRules",
    "AnalysisSummary",
    "AssetMatcher",
    "BrakeTestResult",
    "BrakeTestStatus",
    "BrakeTestType",
    "CautionZone",
    "ChainageMap",
    "FallbackFromLabel",
    "HaltApproachLimits",
    "HaltApproachViolation",
    "MatchOutcome",
    "MatchedPoint",
    "PointStatus",
    "Resolved",
    "Stoppage",
    "ThresholdPolicy",
    "TrackPolyline",
    "TrainType",
    "ValidSection",
    "analyze",
    "apply_speed_limits",
    "classify_speed",
    "detect_brake_tests",
    "detect_halt_approach_violations",
    "detect_stoppages",
    "limit_at",
    "load_rules",
    "resolve_zones",
    "to_dict",
]
