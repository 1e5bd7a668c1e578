"""Position map shared by layout recomputes and node dragging."""

from __future__ import annotations

from typing import Iterator, Mapping

from ..models import Point


class PositionStore:
    """
    Authoritative position map shared by the layout pass and node dragging.

    A structural recompute (focus or data change) replaces everything and
    forgets drags. A non-structural recompute keeps dragged positions on top.
    """

    def __init__(self) -> None:
        self._positions: dict[str, Point] = {}
        self._dragged: dict[str, Point] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def get(self, key: str) -> Point | None:
        return self._positions.get(key)

    @property
    def dragged_keys(self) -> frozenset[str]:
        return frozenset(self._dragged)

    def snapshot(self) -> dict[str, Point]:
        return dict(self._positions)

    def replace_all(self, layout: Mapping[str, Point]) -> None:
        self._positions = dict(layout)
        self._dragged.clear()

    def merged_with(self, layout: Mapping[str, Point]) -> None:
        merged = dict(layout)
        for key, p in self._dragged.items():
            if key in merged:
                merged[key] = p
        self._dragged = {k: p for k, p in self._dragged.items() if k in merged}
        self._positions = merged

    def override(self, key: str, point: Point) -> None:
        p = Point(float(point[0]), float(point[1]))
        self._positions[key] = p
        self._dragged[key] = p
