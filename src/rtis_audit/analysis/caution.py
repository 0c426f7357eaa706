"""Resolve caution orders into linear chainage zones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import structlog

from rtis_audit.data.schemas import CautionOrder

from .track import ChainageMap, ChainageResolution, FallbackFromLabel

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CautionZone:
    """A caution order as ``[start_m, end_m]``, already extended by train length."""

    start_m: float
    end_m: float
    limit_kmph: float
    start_resolution: ChainageResolution | None = None
    end_resolution: ChainageResolution | None = None

    def covers(self, chainage_m: float) -> bool:
        return self.start_m <= chainage_m <= self.end_m


def resolve_zone(order: CautionOrder, chainages: ChainageMap, train_length_m: float) -> CautionZone:
    """Normalise an order's endpoints and extend the far end by the train length.

    The tail of the train is still inside the restriction for one train
    length after the head clears it. Mast spacing is taken as uniform, so the
    extension is plain chainage arithmetic.
    """

    start = chainages.resolve(order.start_label)
    end = chainages.resolve(order.end_label)
    for label, resolution in ((order.start_label, start), (order.end_label, end)):
        if isinstance(resolution, FallbackFromLabel):
            logger.info(
                "caution_zone_label_fallback",
                label=label,
                chainage_m=resolution.chainage_m,
            )
    low = min(start.chainage_m, end.chainage_m)
    high = max(start.chainage_m, end.chainage_m)
    return CautionZone(
        start_m=low,
        end_m=high + train_length_m,
        limit_kmph=float(order.speed_limit_kmph),
        start_resolution=start,
        end_resolution=end,
    )


def resolve_zones(
    orders: Iterable[CautionOrder],
    chainages: ChainageMap,
    train_length_m: float,
) -> list[CautionZone]:
    return [resolve_zone(order, chainages, train_length_m) for order in orders]


def limit_at(chainage_m: float, zones: Sequence[CautionZone], global_mps: float) -> float:
    """Lowest of the global MPS and every zone covering ``chainage_m``."""

    limit = float(global_mps)
    for zone in zones:
        if zone.covers(chainage_m) and zone.limit_kmph < limit:
            limit = zone.limit_kmph
    return limit


__all__ = ["CautionZone", "limit_at", "resolve_zone", "resolve_zones"]
