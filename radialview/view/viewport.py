"""Screen/world transform and fit-to-content geometry.

A ViewTransform is `translate(x, y)` followed by `scale(k)`:

    screen = world * k + (x, y)
"""

from __future__ import annotations

from typing import Mapping, NamedTuple

from ..layout.geometry import NODE_BOX_HEIGHT, NODE_BOX_WIDTH, clamp, compute_graph_bounds
from ..models import Point

DEFAULT_MIN_ZOOM = 0.25
DEFAULT_MAX_ZOOM = 3.0
FIT_PADDING = 5.0
ZOOM_STEP = 1.2


class ViewTransform(NamedTuple):
    x: float
    y: float
    k: float

    def apply(self, p: Point) -> Point:
        return Point(p.x * self.k + self.x, p.y * self.k + self.y)

    def invert(self, sx: float, sy: float) -> Point:
        return Point((sx - self.x) / self.k, (sy - self.y) / self.k)


def reset_transform(width: float, height: float) -> ViewTransform:
    """Origin at the viewport center, 100% zoom."""
    return ViewTransform(width / 2, height / 2, 1.0)


def fallback_transform(width: float, height: float) -> ViewTransform:
    return reset_transform(width, height)


def _centered(center: Point, k: float, width: float, height: float) -> ViewTransform:
    return ViewTransform(width / 2 - center.x * k, height / 2 - center.y * k, k)


def fit_transform(
    positions: Mapping[str, Point],
    width: float,
    height: float,
    *,
    min_zoom: float = DEFAULT_MIN_ZOOM,
    max_zoom: float = DEFAULT_MAX_ZOOM,
    padding: float = FIT_PADDING,
    first_fit: bool = False,
    box_w: float = NODE_BOX_WIDTH,
    box_h: float = NODE_BOX_HEIGHT,
) -> ViewTransform | None:
    """
    Transform that centers the content and scales it to fill the viewport.

    Returns None when there is nothing to fit (no finite bounds, or a zero-size
    viewport); callers keep their current transform in that case. The first fit
    of a session never zooms in past 100%.
    """
    if width <= 0 or height <= 0:
        return None

    bounds = compute_graph_bounds(positions, box_w=box_w, box_h=box_h)
    if bounds is None:
        return None

    padded = bounds.padded(padding)
    content_w = max(1.0, padded.width)
    content_h = max(1.0, padded.height)

    upper = 1.0 if first_fit else max_zoom
    k = min(width / content_w, height / content_h)
    k = clamp(k, min_zoom, max(min_zoom, upper))

    return _centered(padded.center, k, width, height)


def zoom_to_world_point(
    wx: float,
    wy: float,
    k: float,
    width: float,
    height: float,
    *,
    min_zoom: float = DEFAULT_MIN_ZOOM,
    max_zoom: float = DEFAULT_MAX_ZOOM,
) -> ViewTransform:
    """Center the world point (wx, wy) at zoom `k`."""
    return _centered(Point(wx, wy), clamp(k, min_zoom, max_zoom), width, height)


def zoom_by(
    t: ViewTransform,
    factor: float,
    width: float,
    height: float,
    *,
    min_zoom: float = DEFAULT_MIN_ZOOM,
    max_zoom: float = DEFAULT_MAX_ZOOM,
) -> ViewTransform:
    """Scale by `factor`, keeping the world point under the viewport center fixed."""
    center = t.invert(width / 2, height / 2)
    return _centered(center, clamp(t.k * factor, min_zoom, max_zoom), width, height)


def zoom_in(t: ViewTransform, width: float, height: float, **bounds: float) -> ViewTransform:
    return zoom_by(t, ZOOM_STEP, width, height, **bounds)


def zoom_out(t: ViewTransform, width: float, height: float, **bounds: float) -> ViewTransform:
    return zoom_by(t, 1 / ZOOM_STEP, width, height, **bounds)


def pan_by(t: ViewTransform, dx: float, dy: float) -> ViewTransform:
    return ViewTransform(t.x + dx, t.y + dy, t.k)


def resize_transform(
    t: ViewTransform,
    old_size: tuple[float, float],
    new_size: tuple[float, float],
) -> ViewTransform:
    """Keep the world point that was centered in the old viewport centered in the new one."""
    old_w, old_h = old_size
    new_w, new_h = new_size
    if old_w <= 0 or old_h <= 0:
        return t
    center = t.invert(old_w / 2, old_h / 2)
    return _centered(center, t.k, new_w, new_h)


def zoom_percent(t: ViewTransform) -> int:
    return int(round(t.k * 100))
