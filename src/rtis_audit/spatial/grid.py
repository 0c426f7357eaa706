"""Uniform angular grid for local nearest-neighbour candidate lookups."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Hashable, Iterable

DEFAULT_CELL_DEG = 0.01  # ~1.1 km of latitude


class GridIndex:
    """Bucket ids by ``(floor(lat / cell), floor(lon / cell))``.

    ``query_neighborhood`` returns every id in the 3x3 block of cells around
    the query point. The result is a superset of the ids within roughly one
    cell width and must be distance-filtered by the caller.
    """

    def __init__(self, cell_deg: float = DEFAULT_CELL_DEG) -> None:
        if not cell_deg > 0:
            raise ValueError("cell_deg must be positive")
        self.cell_deg = float(cell_deg)
        self._cells: dict[tuple[int, int], list[Hashable]] = defaultdict(list)
        self._size = 0

    def _cell(self, lat: float, lon: float) -> tuple[int, int]:
        return math.floor(lat / self.cell_deg), math.floor(lon / self.cell_deg)

    def insert(self, item_id: Hashable, lat: float, lon: float) -> None:
        self._cells[self._cell(lat, lon)].append(item_id)
        self._size += 1

    def extend(self, items: Iterable[tuple[Hashable, float, float]]) -> None:
        for item_id, lat, lon in items:
            self.insert(item_id, lat, lon)

    def query_neighborhood(self, lat: float, lon: float) -> list[Hashable]:
        cx, cy = self._cell(lat, lon)
        candidates: list[Hashable] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                bucket = self._cells.get((cx + dx, cy + dy))
                if bucket:
                    candidates.extend(bucket)
        return candidates

    def __len__(self) -> int:
        return self._size


__all__ = ["DEFAULT_CELL_DEG", "GridIndex"]
