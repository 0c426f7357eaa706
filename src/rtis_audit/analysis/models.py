"""Result records produced by the trip analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from rtis_audit.data.schemas import AssetKind, TelemetrySample


class TrainType(str, Enum):
    PASSENGER = "passenger"
    GOODS = "goods"

    @property
    def length_m(self) -> float:
        return 700.0 if self is TrainType.GOODS else 600.0


class PointStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    VIOLATION = "violation"


class BrakeTestType(str, Enum):
    BFT = "BFT"
    BPT = "BPT"


class BrakeTestStatus(str, Enum):
    PROPER = "proper"
    IMPROPER = "improper"
    NOT_PERFORMED = "not_performed"


@dataclass(slots=True)
class MatchedPoint:
    """Outcome of matching one reference asset against the trip."""

    location: str
    lat: float
    lon: float
    timestamp: str
    speed_kmph: Optional[float]
    limit_applied_kmph: Optional[float]
    status: PointStatus
    matched: bool
    source: AssetKind
    chainage_m: float = 0.0
    telemetry_index: Optional[int] = None
    distance_m: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ValidSection:
    """Telemetry index range bounded by the first and last matched samples.

    ``combine`` is associative and commutative with ``ValidSection()`` as the
    identity, so partial results from independent match queries can be
    reduced in any order.
    """

    start: Optional[int] = None
    end: Optional[int] = None

    @classmethod
    def of(cls, index: int) -> "ValidSection":
        return cls(index, index)

    @property
    def empty(self) -> bool:
        return self.start is None or self.end is None

    def combine(self, other: "ValidSection") -> "ValidSection":
        if self.empty:
            return other
        if other.empty:
            return self
        return ValidSection(min(self.start, other.start), max(self.end, other.end))

    def slice(self, samples: Sequence[TelemetrySample]) -> List[TelemetrySample]:
        if self.empty:
            return []
        return list(samples[self.start : self.end + 1])


@dataclass(slots=True)
class BrakeTestResult:
    type: BrakeTestType
    status: BrakeTestStatus
    start_speed: float
    lowest_speed: float
    drop_amount: float
    location: str
    timestamp: str
    details: str = ""


@dataclass(slots=True)
class Stoppage:
    location: str
    lat: float
    lon: float
    arrival_time: str
    departure_time: str
    duration_min: float
    is_signal: bool
    telemetry_index: int = 0


@dataclass(slots=True)
class HaltApproachViolation:
    halt_location: str
    checkpoint: str
    limit_kmph: float
    actual_speed_kmph: float
    timestamp: str


@dataclass(slots=True)
class AnalysisSummary:
    total_structures: int
    matched_structures: int
    unmatched_structures: int
    match_rate: float
    avg_speed: float
    max_speed: float
    min_speed: float
    violation_count: int
    warning_count: int
    config_mps: float
    train_type: TrainType
    stoppages: List[Stoppage] = field(default_factory=list)
    brake_tests: List[BrakeTestResult] = field(default_factory=list)
    halt_approach_violations: List[HaltApproachViolation] = field(default_factory=list)
    valid_section: ValidSection = field(default_factory=ValidSection)


@dataclass(slots=True)
class AnalysisResult:
    """Container holding the summary, per-asset results and Markdown text."""

    summary: AnalysisSummary
    results: List[MatchedPoint]
    signals: List[MatchedPoint]
    summary_md: str = ""


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def to_dict(record: Any) -> Dict[str, Any]:
    """Convert any result dataclass into JSON-serialisable primitives."""

    return _plain(asdict(record))


__all__ = [
    "AnalysisResult",
    "AnalysisSummary",
    "BrakeTestResult",
    "BrakeTestStatus",
    "BrakeTestType",
    "HaltApproachViolation",
    "MatchedPoint",
    "PointStatus",
    "Stoppage",
    "TrainType",
    "ValidSection",
    "to_dict",
]
