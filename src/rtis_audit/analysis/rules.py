"""Rule configuration helpers for the trip analysis engine."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from rtis_audit.data.schemas import CautionOrder
from rtis_audit.spatial.grid import DEFAULT_CELL_DEG

from .classifier import ThresholdPolicy
from .matcher import DEFAULT_MAX_DISTANCE_M
from .models import TrainType
from .stoppages import HaltApproachLimits

DEFAULT_GLOBAL_MPS_KMPH = 110.0


@dataclass(frozen=True)
class AnalysisRules:
    """Caller-supplied parameters of one trip analysis."""

    global_mps_kmph: float = DEFAULT_GLOBAL_MPS_KMPH
    max_distance_m: float = DEFAULT_MAX_DISTANCE_M
    train_type: TrainType = TrainType.PASSENGER
    departure_time: str | None = None
    arrival_time: str | None = None
    caution_orders: tuple[CautionOrder, ...] = ()
    threshold_policy: ThresholdPolicy = field(default_factory=ThresholdPolicy)
    halt_approach_limits: HaltApproachLimits = field(default_factory=HaltApproachLimits)
    grid_cell_deg: float = DEFAULT_CELL_DEG
    dayfirst: bool = False
    timestamp_format: str | None = None

    def __post_init__(self) -> None:
        if not self.global_mps_kmph > 0:
            raise ValueError("global_mps_kmph must be positive")
        if not isinstance(self.dayfirst, bool):
            raise ValueError("dayfirst must be true or false")
        if self.timestamp_format is not None and not isinstance(self.timestamp_format, str):
            raise ValueError("timestamp_format must be a strftime-style string")

    @property
    def train_length_m(self) -> float:
        return self.train_type.length_m

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "AnalysisRules":
        orders = tuple(
            order if isinstance(order, CautionOrder) else CautionOrder.model_validate(order)
            for order in config.get("caution_orders") or ()
        )
        max_distance = config.get("max_distance_m")
        return cls(
            global_mps_kmph=float(config.get("global_mps_kmph", DEFAULT_GLOBAL_MPS_KMPH)),
            max_distance_m=(
                DEFAULT_MAX_DISTANCE_M if max_distance is None else float(max_distance)
            ),
            train_type=TrainType(config.get("train_type") or TrainType.PASSENGER.value),
            departure_time=config.get("departure_time") or None,
            arrival_time=config.get("arrival_time") or None,
            caution_orders=orders,
            threshold_policy=ThresholdPolicy.from_mapping(config.get("threshold_policy")),
            halt_approach_limits=HaltApproachLimits.from_mapping(
                config.get("halt_approach_limits")
            ),
            grid_cell_deg=float(config.get("grid_cell_deg", DEFAULT_CELL_DEG)),
            dayfirst=config.get("dayfirst", False),
            timestamp_format=config.get("timestamp_format") or None,
        )


def _load_mapping_from_file(path: Path) -> Mapping[str, Any]:
    text = path.read_text()

    # JSON is a subset of YAML, so try JSON first for clearer error messages.
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text)
    if not isinstance(data, Mapping):
        raise TypeError("Rule configuration must evaluate to a mapping")
    return data


def load_rules(config: str | Path | Mapping[str, Any] | None = None) -> AnalysisRules:
    """Load :class:`AnalysisRules` from a mapping or configuration file."""

    if config is None:
        return AnalysisRules()
    if isinstance(config, Mapping):
        mapping = config
    else:
        mapping = _load_mapping_from_file(Path(config))

    return AnalysisRules.from_mapping(mapping)


__all__ = ["AnalysisRules", "DEFAULT_GLOBAL_MPS_KMPH", "load_rules"]
