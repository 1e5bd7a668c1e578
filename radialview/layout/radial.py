"""Radial layout strategies.

Two placement strategies share the BFS levels computed from the focus node:

- simple: level 1 on a circle, deeper levels on arcs around the parent's
  outward angle;
- advanced: level 1 on one or two rectangular rings, deeper levels pushed
  outside the rectangle, fanned (expandable parent) or combed (leaf parent).

`compute_radial_layout_adaptive` picks between them by level-1 fan-out.
Sibling order is sorted by key in advanced mode, so identical input always
produces identical positions.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Literal, Mapping, Sequence

from ..models import MAX_SUPPORTED_DEPTH, Edge, LevelInfo, Node, Point
from .geometry import NodeBox, clamp, deg_to_rad
from .levels import children_by_parent, compute_tree_levels, count_at_depth, group_by_depth

logger = logging.getLogger(__name__)

RING_U_OFFSET = 0.015
MIN_RECT_HALF = 120.0
MAX_FAN_DEG = 140.0
DEFAULT_RECT_RINGS_MIN_LVL1 = 80

Radii = Mapping[int, float]
IsExpandable = Callable[[Node], bool]
LayoutMode = Literal["simple", "advanced"]


@dataclass(frozen=True)
class RectRingsLayout:
    """Level-1 placement on rectangle perimeters (outer ring + scaled inner ring)."""

    half_w: float | None = None  # defaults to the level-1 radius
    half_h: float | None = None
    outer_ratio: float = 0.55  # fraction of level-1 nodes in the outer ring
    inner_scale: float = 0.72  # inner ring scale toward the center

    def extents(self, radii: Radii) -> tuple[float, float]:
        r1 = radius_for_depth(radii, 1)
        half_w = max(MIN_RECT_HALF, self.half_w if self.half_w is not None else r1)
        half_h = max(MIN_RECT_HALF, self.half_h if self.half_h is not None else r1)
        return half_w, half_h


def _never_expandable(_: Node) -> bool:
    return False


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def radius_for_depth(radii: Radii, depth: int) -> float:
    """Base radius for `depth`, falling back to the closest shallower level."""
    for d in range(depth, 0, -1):
        if d in radii:
            return float(radii[d])
    return 0.0


def default_level_radii(width: float, height: float, overrides: Radii | None = None) -> dict[int, float]:
    """Per-level base radii derived from the viewport size.

    Level 1 sits at 28% of the smaller viewport side; levels 2-3 a bit further
    out, levels 4+ closer to their parent. Explicit overrides win.
    """
    overrides = overrides or {}
    base = min(width, height) * 0.28
    radii = {
        1: base,
        2: max(60.0, base * 1.15),
        3: max(55.0, base * 1.15),
    }
    for depth in range(4, MAX_SUPPORTED_DEPTH + 1):
        radii[depth] = max(55.0, base * 0.45)
    for depth, r in overrides.items():
        if 1 <= int(depth) <= MAX_SUPPORTED_DEPTH:
            radii[int(depth)] = float(r)
    return radii


def rect_half_extents_for_viewport(width: float, height: float, box: NodeBox) -> tuple[float, float]:
    return max(160.0, width / 2 - box.w), max(160.0, height / 2 - box.h)


def point_on_rect_perimeter(u: float, half_w: float, half_h: float) -> Point:
    """Point at fraction `u` of the perimeter of a centered rectangle.

    `u` wraps into [0, 1). The walk is clockwise in screen coordinates (y down)
    and starts at the midpoint of the right edge.
    """
    w = half_w * 2
    h = half_h * 2
    perimeter = 2 * (w + h)
    if perimeter <= 0:
        return Point(0.0, 0.0)

    # distance measured from the top-right corner
    d = ((u - math.floor(u)) * perimeter + half_h) % perimeter

    # right edge, top to bottom
    if d <= h:
        return Point(half_w, -half_h + d)
    d -= h

    # bottom edge, right to left
    if d <= w:
        return Point(half_w - d, half_h)
    d -= w

    # left edge, bottom to top
    if d <= h:
        return Point(-half_w, half_h - d)
    d -= h

    # top edge, left to right
    return Point(-half_w + d, -half_h)


def rect_outward_normal(p: Point, half_w: float, half_h: float) -> tuple[float, float, float, float]:
    """Return (nx, ny, tx, ty): outward normal and tangent of the side nearest `p`."""
    dx = half_w - abs(p.x)
    dy = half_h - abs(p.y)

    if dx < dy:
        # vertical side: horizontal normal, vertical tangent
        return (1.0 if p.x >= 0 else -1.0), 0.0, 0.0, 1.0

    return 0.0, (1.0 if p.y >= 0 else -1.0), 1.0, 0.0


def _sibling_fraction(siblings: Sequence[str], key: str) -> float:
    """Interpolation parameter in [0, 1]; a single child sits in the middle."""
    if len(siblings) <= 1:
        return 0.5
    return siblings.index(key) / (len(siblings) - 1)


def _arc_position(parent: Point, t: float, spread: float, distance: float) -> Point:
    parent_angle = math.atan2(parent.y, parent.x)
    angle = parent_angle - spread / 2 + t * spread
    return Point(parent.x + math.cos(angle) * distance, parent.y + math.sin(angle) * distance)


def _place_on_circle(keys: Sequence[str], radius: float, positions: dict[str, Point]) -> None:
    count = max(1, len(keys))
    for i, key in enumerate(keys):
        a = (i / count) * math.pi * 2
        positions[key] = Point(math.cos(a) * radius, math.sin(a) * radius)


def compute_radial_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    max_depth: int,
    radii: Radii,
    child_spread_deg: float,
    *,
    levels: dict[str, LevelInfo] | None = None,
) -> dict[str, Point]:
    """Simple radial layout.

    Level 1 is spread evenly on a circle of `radii[1]`; each deeper node lands
    on an arc of `child_spread_deg` centered on its parent's angle from the
    origin, at `radii[depth]` from the parent.
    """
    if levels is None:
        levels = compute_tree_levels(nodes, edges, center_key, max_depth)
    if center_key not in levels:
        return {}

    positions: dict[str, Point] = {center_key: Point(0.0, 0.0)}
    by_depth = group_by_depth(nodes, levels)

    _place_on_circle(by_depth.get(1, []), radius_for_depth(radii, 1), positions)

    children = children_by_parent(levels)
    spread = deg_to_rad(child_spread_deg)

    for depth in range(2, max_depth + 1):
        distance = radius_for_depth(radii, depth)
        for key in by_depth.get(depth, []):
            parent_key = levels[key].parent
            parent_pos = positions.get(parent_key) if parent_key else None
            if parent_pos is None:
                continue
            siblings = children.get(parent_key, [key])
            positions[key] = _arc_position(parent_pos, _sibling_fraction(siblings, key), spread, distance)

    return positions


def _split_rings(
    lvl1: Sequence[str],
    expandable: Sequence[str],
    others: Sequence[str],
    outer_ratio: float,
) -> tuple[list[str], list[str]]:
    """Outer ring gets every expandable node, then leaves up to the outer quota."""
    outer_count = max(1, _round_half_up(len(lvl1) * outer_ratio))
    outer = list(expandable)
    for key in others:
        if len(outer) >= outer_count:
            break
        outer.append(key)
    outer_set = set(outer)
    inner = [k for k in lvl1 if k not in outer_set]
    return outer, inner


def compute_radial_layout_advanced(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    max_depth: int,
    radii: Radii,
    child_spread_deg: float,
    *,
    level1_layout: RectRingsLayout | None = None,
    is_expandable: IsExpandable | None = None,
    node_box: NodeBox | None = None,
    levels: dict[str, LevelInfo] | None = None,
) -> dict[str, Point]:
    """Advanced radial layout with optional rectangular rings for level 1.

    With `level1_layout=None` level 1 is laid on a circle and deeper levels
    follow the simple arc rule (with key-sorted siblings).
    """
    is_expandable = is_expandable or _never_expandable
    box = node_box or NodeBox()
    node_by_key = {n.key: n for n in nodes}

    if levels is None:
        levels = compute_tree_levels(nodes, edges, center_key, max_depth)
    if center_key not in levels:
        return {}

    positions: dict[str, Point] = {center_key: Point(0.0, 0.0)}
    by_depth = group_by_depth(nodes, levels)

    lvl1 = sorted(by_depth.get(1, []))
    expandable_lvl1 = [k for k in lvl1 if k in node_by_key and is_expandable(node_by_key[k])]
    expandable_set = set(expandable_lvl1)
    leaf_lvl1 = [k for k in lvl1 if k not in expandable_set]

    half_w = half_h = 0.0
    if level1_layout is not None:
        half_w, half_h = level1_layout.extents(radii)
        outer_ratio = clamp(level1_layout.outer_ratio, 0.05, 0.95)
        inner_scale = clamp(level1_layout.inner_scale, 0.2, 0.98)

        outer_keys, inner_keys = _split_rings(lvl1, expandable_lvl1, leaf_lvl1, outer_ratio)

        for i, key in enumerate(outer_keys):
            u = i / max(1, len(outer_keys)) + RING_U_OFFSET
            positions[key] = point_on_rect_perimeter(u, half_w, half_h)

        for i, key in enumerate(inner_keys):
            p = point_on_rect_perimeter(i / max(1, len(inner_keys)), half_w, half_h)
            positions[key] = Point(p.x * inner_scale, p.y * inner_scale)
    else:
        _place_on_circle(lvl1, radius_for_depth(radii, 1), positions)

    children = children_by_parent(levels)
    for siblings in children.values():
        siblings.sort()

    spread = deg_to_rad(child_spread_deg)
    min_sep = box.min_separation
    max_fan = deg_to_rad(MAX_FAN_DEG)

    for depth in range(2, max_depth + 1):
        base_radius = radius_for_depth(radii, depth)
        for key in sorted(by_depth.get(depth, [])):
            parent_key = levels[key].parent
            parent_pos = positions.get(parent_key) if parent_key else None
            if parent_pos is None:
                continue

            siblings = children.get(parent_key, [key])
            t = _sibling_fraction(siblings, key)

            if level1_layout is None:
                positions[key] = _arc_position(parent_pos, t, spread, base_radius)
                continue

            nx, ny, tx, ty = rect_outward_normal(parent_pos, half_w, half_h)
            outward = max(base_radius, min_sep * 1.1)
            parent_node = node_by_key.get(parent_key)

            if parent_node is not None and is_expandable(parent_node):
                # fan around the outward direction, wider for crowded sibling sets
                base_angle = math.atan2(ny, nx)
                fan = min(max_fan, max(spread, (len(siblings) - 1) * (min_sep / outward)))
                angle = base_angle - fan / 2 + t * fan
                positions[key] = Point(
                    parent_pos.x + math.cos(angle) * outward,
                    parent_pos.y + math.sin(angle) * outward,
                )
            else:
                # comb: fixed outward distance, spread along the side's tangent
                offset = (t - 0.5) * min_sep
                positions[key] = Point(
                    parent_pos.x + nx * outward + tx * offset,
                    parent_pos.y + ny * outward + ty * offset,
                )

    return positions


def choose_layout_mode(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    rect_rings_min_lvl1: int = DEFAULT_RECT_RINGS_MIN_LVL1,
) -> tuple[LayoutMode, int]:
    """Return the layout mode for this fan-out and the level-1 node count."""
    levels = compute_tree_levels(nodes, edges, center_key, 1)
    lvl1_count = count_at_depth(levels, 1)
    mode: LayoutMode = "simple" if lvl1_count < rect_rings_min_lvl1 else "advanced"
    return mode, lvl1_count


def compute_radial_layout_adaptive(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    max_depth: int,
    radii: Radii,
    child_spread_deg: float,
    *,
    rect_rings_min_lvl1: int = DEFAULT_RECT_RINGS_MIN_LVL1,
    level1_layout: RectRingsLayout | None = None,
    is_expandable: IsExpandable | None = None,
    node_box: NodeBox | None = None,
) -> dict[str, Point]:
    """Simple layout below `rect_rings_min_lvl1` level-1 nodes, advanced layout otherwise."""
    mode, lvl1_count = choose_layout_mode(nodes, edges, center_key, rect_rings_min_lvl1)

    if mode == "simple":
        return compute_radial_layout(nodes, edges, center_key, max_depth, radii, child_spread_deg)

    logger.debug("using advanced layout for lvl1_count=%d", lvl1_count)
    return compute_radial_layout_advanced(
        nodes,
        edges,
        center_key,
        max_depth,
        radii,
        child_spread_deg,
        level1_layout=level1_layout,
        is_expandable=is_expandable,
        node_box=node_box,
    )


def compute_child_radius(base_radius: float, child_count: int, node_size: float, padding: float = 12.0) -> float:
    """Radius large enough to fit `child_count` boxes on the circumference."""
    if child_count <= 1:
        return base_radius
    needed_circumference = child_count * (node_size + padding)
    return max(base_radius, needed_circumference / (2 * math.pi))


def compute_radial_layout_dynamic(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    max_depth: int,
    radii: Radii,
    *,
    node_box: NodeBox | None = None,
) -> dict[str, Point]:
    """Radial layout whose per-subtree radius grows until the children fit.

    Follows edge direction (source -> target). Each parent spreads its children
    over a full circle starting opposite its own angle. A node reachable twice
    keeps its first placement.
    """
    known = {n.key for n in nodes}
    if center_key not in known:
        return {}

    box = node_box or NodeBox()
    node_size = max(box.w, box.h)

    children: dict[str, list[str]] = {}
    for e in edges:
        if e.source in known and e.target in known:
            children.setdefault(e.source, []).append(e.target)

    positions: dict[str, Point] = {center_key: Point(0.0, 0.0)}

    def layout_subtree(parent_key: str, level: int, parent_angle: float, parent_radius: float) -> None:
        if level > max_depth:
            return
        kids = [k for k in dict.fromkeys(children.get(parent_key, [])) if k not in positions]
        if not kids:
            return

        base = float(radii[level]) if level in radii else parent_radius
        radius = compute_child_radius(base, len(kids), node_size)
        step = 2 * math.pi / len(kids)
        start = parent_angle - math.pi
        parent_pos = positions[parent_key]

        placed: list[tuple[str, float]] = []
        for i, key in enumerate(kids):
            if key in positions:
                continue
            angle = start + i * step
            positions[key] = Point(
                parent_pos.x + math.cos(angle) * radius,
                parent_pos.y + math.sin(angle) * radius,
            )
            placed.append((key, angle))

        for key, angle in placed:
            layout_subtree(key, level + 1, angle, radius)

    layout_subtree(center_key, 1, 0.0, radius_for_depth(radii, 1))
    return positions
