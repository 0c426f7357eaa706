"""The OHE catalogue as an ordered polyline with label-derived chainage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

from rtis_audit.data.schemas import ReferenceAsset
from rtis_audit.utils.chainage import label_to_chainage


@dataclass(frozen=True, slots=True)
class Resolved:
    """Chainage of a label found in the catalogue."""

    chainage_m: float


@dataclass(frozen=True, slots=True)
class FallbackFromLabel:
    """Chainage computed from label text because the label is not catalogued."""

    chainage_m: float


ChainageResolution = Union[Resolved, FallbackFromLabel]


class ChainageMap:
    """Mapping from asset label to resolved chainage.

    The first occurrence of a label wins when a catalogue repeats one.
    """

    def __init__(self, assets: Sequence[ReferenceAsset] = ()) -> None:
        self._chainage: dict[str, float] = {}
        for asset in assets:
            self._chainage.setdefault(asset.label.strip(), label_to_chainage(asset.label))

    def resolve(self, label: str) -> ChainageResolution:
        key = label.strip()
        if key in self._chainage:
            return Resolved(self._chainage[key])
        return FallbackFromLabel(label_to_chainage(key))

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and label.strip() in self._chainage

    def __len__(self) -> int:
        return len(self._chainage)


class TrackPolyline:
    """Catalogue-ordered assets; each consecutive pair is one straight segment."""

    def __init__(self, assets: Sequence[ReferenceAsset]) -> None:
        self._assets = tuple(assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[ReferenceAsset]:
        return iter(self._assets)

    def __getitem__(self, position: int) -> ReferenceAsset:
        return self._assets[position]

    def segment_to_next(self, position: int) -> Optional[tuple[ReferenceAsset, ReferenceAsset]]:
        """Return ``(asset, next_asset)`` or ``None`` for the last asset."""

        if position < 0 or position + 1 >= len(self._assets):
            return None
        return self._assets[position], self._assets[position + 1]

    def chainage_map(self) -> ChainageMap:
        return ChainageMap(self._assets)


__all__ = [
    "ChainageMap",
    "ChainageResolution",
    "FallbackFromLabel",
    "Resolved",
    "TrackPolyline",
]
