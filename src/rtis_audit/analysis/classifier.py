"""Speed classification against the applied limit."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Mapping, Sequence

from rtis_audit.data.schemas import AssetKind

from .caution import CautionZone, limit_at
from .models import MatchedPoint, PointStatus

# Allowance for GPS speed-reporting jitter above the limit.
DEFAULT_VIOLATION_MARGIN_KMPH = 3.0
DEFAULT_WARNING_RATIO = 0.95


@dataclass(frozen=True)
class ThresholdPolicy:
    """How far above the limit a speed becomes a warning or a violation.

    ``offset`` (default): violation above ``limit + margin``, warning above
    ``limit``. ``ratio``: violation above ``limit``, warning above
    ``ratio * limit``.
    """

    mode: Literal["offset", "ratio"] = "offset"
    violation_margin_kmph: float = DEFAULT_VIOLATION_MARGIN_KMPH
    warning_ratio: float = DEFAULT_WARNING_RATIO

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "ThresholdPolicy":
        config = config or {}
        mode = config.get("mode", "offset")
        if mode not in ("offset", "ratio"):
            raise ValueError(f"Unknown threshold policy mode '{mode}'")
        return cls(
            mode=mode,
            violation_margin_kmph=float(
                config.get("violation_margin_kmph", DEFAULT_VIOLATION_MARGIN_KMPH)
            ),
            warning_ratio=float(config.get("warning_ratio", DEFAULT_WARNING_RATIO)),
        )

    def classify(self, speed_kmph: float, limit_kmph: float) -> PointStatus:
        if self.mode == "ratio":
            if speed_kmph > limit_kmph:
                return PointStatus.VIOLATION
            if speed_kmph > self.warning_ratio * limit_kmph:
                return PointStatus.WARNING
            return PointStatus.OK
        if speed_kmph > limit_kmph + self.violation_margin_kmph:
            return PointStatus.VIOLATION
        if speed_kmph > limit_kmph:
            return PointStatus.WARNING
        return PointStatus.OK


DEFAULT_POLICY = ThresholdPolicy()


def classify_speed(
    speed_kmph: float,
    limit_kmph: float,
    policy: ThresholdPolicy = DEFAULT_POLICY,
) -> PointStatus:
    return policy.classify(speed_kmph, limit_kmph)


def apply_speed_limits(
    points: Sequence[MatchedPoint],
    zones: Sequence[CautionZone],
    global_mps: float,
    policy: ThresholdPolicy = DEFAULT_POLICY,
) -> list[MatchedPoint]:
    """Attach the applied limit and a status to every matched OHE point.

    Signals carry no limit of their own and stay ``ok``; unmatched assets are
    left untouched.
    """

    out: list[MatchedPoint] = []
    for point in points:
        if not point.matched or point.source is not AssetKind.OHE or point.speed_kmph is None:
            out.append(point)
            continue
        limit = limit_at(point.chainage_m, zones, global_mps)
        out.append(
            replace(
                point,
                limit_applied_kmph=limit,
                status=policy.classify(point.speed_kmph, limit),
            )
        )
    return out


__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_VIOLATION_MARGIN_KMPH",
    "ThresholdPolicy",
    "apply_speed_limits",
    "classify_speed",
]
