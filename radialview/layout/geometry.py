"""Node box constants and small geometry helpers shared by layout and viewport code."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, NamedTuple

from ..models import Point

ICON_TOP = 4
ICON_SIZE = 24
NODE_BOX_WIDTH = 90
NODE_BOX_HEIGHT = 50

# Edges are drawn from icon centers, not box centers.
ICON_CENTER_Y_OFFSET = -(NODE_BOX_HEIGHT / 2) + ICON_TOP + ICON_SIZE / 2


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def deg_to_rad(deg: float) -> float:
    return deg * math.pi / 180


@dataclass(frozen=True)
class NodeBox:
    """Rendered node box size plus the padding used in spacing formulas."""

    w: float = NODE_BOX_WIDTH
    h: float = NODE_BOX_HEIGHT
    pad: float = 10.0

    @property
    def min_separation(self) -> float:
        """Heuristic lower bound on center distance between neighbors."""
        return max(self.w, self.h) + self.pad


class Bounds(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def padded(self, pad_x: float, pad_y: float | None = None) -> "Bounds":
        pad_y = pad_x if pad_y is None else pad_y
        return Bounds(self.min_x - pad_x, self.min_y - pad_y, self.max_x + pad_x, self.max_y + pad_y)


class BoundsBuilder:
    """Accumulates a bounding box; `build()` returns None when nothing finite was added."""

    def __init__(self) -> None:
        self.min_x = math.inf
        self.min_y = math.inf
        self.max_x = -math.inf
        self.max_y = -math.inf

    def grow(self, x: float, y: float) -> None:
        self.min_x = min(self.min_x, x)
        self.min_y = min(self.min_y, y)
        self.max_x = max(self.max_x, x)
        self.max_y = max(self.max_y, y)

    def grow_box(self, p: Point, half_w: float, half_h: float) -> None:
        self.grow(p.x - half_w, p.y - half_h)
        self.grow(p.x + half_w, p.y + half_h)

    def build(self) -> Bounds | None:
        values = (self.min_x, self.min_y, self.max_x, self.max_y)
        if not all(math.isfinite(v) for v in values):
            return None
        return Bounds(*values)


def node_icon_center(p: Point) -> Point:
    """Edge anchor point for a node positioned at `p`."""
    return Point(p.x, p.y + ICON_CENTER_Y_OFFSET)


def compute_graph_bounds(
    positions: Mapping[str, Point],
    *,
    box_w: float = NODE_BOX_WIDTH,
    box_h: float = NODE_BOX_HEIGHT,
) -> Bounds | None:
    """Union of node boxes and edge anchor points, or None if nothing is positioned."""
    b = BoundsBuilder()

    for p in positions.values():
        b.grow_box(p, box_w / 2, box_h / 2)

    for p in positions.values():
        c = node_icon_center(p)
        b.grow(c.x, c.y)

    return b.build()
