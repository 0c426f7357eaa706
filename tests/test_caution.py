from __future__ import annotations

import pytest
from pydantic import ValidationError

from rtis_audit.analysis.caution import CautionZone, limit_at, resolve_zone, resolve_zones
from rtis_audit.analysis.models import TrainType
from rtis_audit.analysis.track import ChainageMap, FallbackFromLabel, Resolved
from rtis_audit.data.schemas import CautionOrder, ReferenceAsset


def _chainages() -> ChainageMap:
    labels = ["962/0", "963/0", "964/0", "965/0"]
    return ChainageMap(
        [ReferenceAsset(label, 21.0 + i * 0.009, 79.0) for i, label in enumerate(labels)]
    )


def test_zone_extends_far_end_by_passenger_length() -> None:
    order = CautionOrder(startOhe="962/0", endOhe="964/0", speedLimit=60)

    zone = resolve_zone(order, _chainages(), TrainType.PASSENGER.length_m)

    assert (zone.start_m, zone.end_m) == (962_000.0, 964_600.0)
    assert zone.limit_kmph == 60.0
    assert zone.start_resolution == Resolved(962_000.0)


def test_goods_train_zone_is_longer() -> None:
    order = CautionOrder(start_label="962/0", end_label="964/0", speed_limit_kmph=60)

    zone = resolve_zone(order, _chainages(), TrainType.GOODS.length_m)

    assert zone.end_m == 964_700.0


def test_reversed_order_labels_give_the_same_zone() -> None:
    forward = CautionOrder(startOhe="962/0", endOhe="964/0", speedLimit=60)
    backward = CautionOrder(startOhe="964/0", endOhe="962/0", speedLimit=60)

    a = resolve_zone(forward, _chainages(), 600.0)
    b = resolve_zone(backward, _chainages(), 600.0)

    assert (a.start_m, a.end_m) == (b.start_m, b.end_m)


def test_unknown_label_falls_back_to_label_chainage() -> None:
    order = CautionOrder(startOhe="962/0", endOhe="970/5", speedLimit=45)

    zone = resolve_zone(order, _chainages(), 600.0)

    assert zone.end_resolution == FallbackFromLabel(970_300.0)
    assert zone.end_m == 970_900.0


def test_limit_at_uses_lowest_covering_zone() -> None:
    zones = resolve_zones(
        [
            CautionOrder(startOhe="962/0", endOhe="964/0", speedLimit=60),
            CautionOrder(startOhe="963/0", endOhe="963/0", speedLimit=30),
        ],
        _chainages(),
        600.0,
    )

    assert limit_at(961_999.0, zones, 110) == 110.0
    assert limit_at(962_000.0, zones, 110) == 60.0
    assert limit_at(963_300.0, zones, 110) == 30.0
    assert limit_at(964_500.0, zones, 110) == 60.0
    assert limit_at(964_600.0, zones, 110) == 60.0
    assert limit_at(964_700.0, zones, 110) == 110.0


def test_zone_above_global_limit_does_not_raise_it() -> None:
    zone = CautionZone(start_m=0.0, end_m=1_000.0, limit_kmph=130.0)

    assert limit_at(500.0, [zone], 110) == 110.0


@pytest.mark.parametrize(
    "payload",
    [
        {"startOhe": " ", "endOhe": "964/0", "speedLimit": 60},
        {"startOhe": "962/0", "endOhe": "964/0", "speedLimit": 0},
        {"startOhe": "962/0", "speedLimit": 60},
    ],
)
def test_invalid_caution_orders_are_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        CautionOrder.model_validate(payload)
