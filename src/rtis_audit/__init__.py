"""Speed-compliance and brake-test audit of RTIS train telemetry."""

from .analysis import AnalysisEngine, AnalysisResult, AnalysisRules, analyze, load_rules
from .errors import (
    AnalysisInputError,
    EmptyTimeWindow,
    InvalidTimeWindow,
    MissingRequiredColumn,
    NoValidTelemetry,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisEngine",
    "AnalysisInputError",
    "AnalysisResult",
    "AnalysisRules",
    "EmptyTimeWindow",
    "InvalidTimeWindow",
    "MissingRequiredColumn",
    "NoValidTelemetry",
    "analyze",
    "load_rules",
]
