"""Grid clustering of positioned nodes and aggregation of edges between clusters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..models import Edge, Node, Point
from .geometry import NODE_BOX_HEIGHT, NODE_BOX_WIDTH, Bounds, BoundsBuilder

CLUSTER_ZOOM_THRESHOLD = 0.9
CLUSTER_GRID_SIZE = 160  # world units


@dataclass
class ClusterGroup:
    key: str
    members: list[str] = field(default_factory=list)
    bounds: Bounds | None = None
    center: Point = Point(0.0, 0.0)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class ClusterResult:
    groups: list[ClusterGroup] = field(default_factory=list)
    node_to_group: dict[str, str] = field(default_factory=dict)
    group_positions: dict[str, Point] = field(default_factory=dict)
    group_bounds: dict[str, Bounds] = field(default_factory=dict)

    def group_sizes(self) -> dict[str, int]:
        return {g.key: g.size for g in self.groups}


@dataclass(frozen=True)
class AggregatedEdge:
    source: str  # group key
    target: str  # group key
    count: int


def should_cluster(zoom: float, *, threshold: float = CLUSTER_ZOOM_THRESHOLD, dragging: bool = False) -> bool:
    """Clustering is active below the zoom threshold, and suspended while a node is dragged."""
    return zoom < threshold and not dragging


def cell_key(p: Point, grid_size: float) -> str:
    grid_size = max(1.0, float(grid_size))
    return f"G:{math.floor(p.x / grid_size)},{math.floor(p.y / grid_size)}"


def compute_grid_clusters(
    nodes: Sequence[Node],
    positions: Mapping[str, Point],
    grid_size: float = CLUSTER_GRID_SIZE,
) -> ClusterResult:
    """Bucket positioned nodes into uniform grid cells.

    Groups are keyed by cell coordinates, so identity survives small position
    jitter. Bounds are padded by a third of the node box so the group outline
    contains the rendered boxes. Nodes without a position are ignored.
    """
    pad_x = NODE_BOX_WIDTH / 3
    pad_y = NODE_BOX_HEIGHT / 3

    builders: dict[str, BoundsBuilder] = {}
    groups_by_key: dict[str, ClusterGroup] = {}
    node_to_group: dict[str, str] = {}

    for n in nodes:
        p = positions.get(n.key)
        if p is None or n.key in node_to_group:
            continue

        g_key = cell_key(p, grid_size)
        group = groups_by_key.get(g_key)
        if group is None:
            group = ClusterGroup(key=g_key)
            groups_by_key[g_key] = group
            builders[g_key] = BoundsBuilder()

        group.members.append(n.key)
        node_to_group[n.key] = g_key
        builders[g_key].grow_box(p, pad_x, pad_y)

    result = ClusterResult(node_to_group=node_to_group)

    for g_key, group in groups_by_key.items():
        bounds = builders[g_key].build()
        if bounds is None:
            continue
        group.bounds = bounds
        group.center = bounds.center
        result.groups.append(group)
        result.group_positions[g_key] = group.center
        result.group_bounds[g_key] = bounds

    # stable render order
    result.groups.sort(key=lambda g: g.key)
    return result


def compute_aggregated_edges(
    edges: Sequence[Edge],
    node_to_group: Mapping[str, str],
    group_sizes: Mapping[str, int],
) -> list[AggregatedEdge]:
    """Count edges between distinct groups, per ordered (source, target) group pair.

    An edge between two singleton groups is not aggregated; it renders as a
    normal edge.
    """
    counts: dict[tuple[str, str], int] = {}

    for e in edges:
        g_from = node_to_group.get(e.source)
        g_to = node_to_group.get(e.target)
        if g_from is None or g_to is None:
            continue
        if g_from == g_to:
            continue
        if group_sizes.get(g_from, 1) == 1 and group_sizes.get(g_to, 1) == 1:
            continue

        pair = (g_from, g_to)
        counts[pair] = counts.get(pair, 0) + 1

    return [AggregatedEdge(source=a, target=b, count=c) for (a, b), c in counts.items()]
