"""Breadth-first level assignment relative to a focus node."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Sequence

from ..models import Edge, LevelInfo, Node


def build_adjacency(nodes: Iterable[Node], edges: Iterable[Edge]) -> dict[str, list[str]]:
    """Undirected adjacency lists in edge-list order.

    Edges referencing a key that is not in `nodes` are dropped.
    """
    adj: dict[str, list[str]] = {n.key: [] for n in nodes}
    for e in edges:
        if e.source not in adj or e.target not in adj:
            continue
        adj[e.source].append(e.target)
        adj[e.target].append(e.source)
    return adj


def compute_tree_levels(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center_key: str,
    max_depth: int,
) -> dict[str, LevelInfo]:
    """Return depth and BFS parent for every node reachable within `max_depth`.

    The first edge (in edge-list order) reaching an unvisited node decides its
    parent, so the parent pointers form a spanning tree of the reached subgraph.
    Nodes at `max_depth` are included but not expanded. An unknown `center_key`
    yields an empty mapping.
    """
    adj = build_adjacency(nodes, edges)

    levels: dict[str, LevelInfo] = {}
    if center_key not in adj:
        return levels

    queue: deque[str] = deque([center_key])
    levels[center_key] = LevelInfo(depth=0)

    while queue:
        current = queue.popleft()
        info = levels[current]
        if info.depth >= max_depth:
            continue

        for nb in adj[current]:
            if nb in levels:
                continue
            levels[nb] = LevelInfo(depth=info.depth + 1, parent=current)
            queue.append(nb)

    return levels


def group_by_depth(nodes: Sequence[Node], levels: dict[str, LevelInfo]) -> dict[int, list[str]]:
    """Node keys per depth, keeping node-list order within each depth."""
    by_depth: dict[int, list[str]] = {}
    for n in nodes:
        info = levels.get(n.key)
        if info is None:
            continue
        by_depth.setdefault(info.depth, []).append(n.key)
    return by_depth


def children_by_parent(levels: dict[str, LevelInfo]) -> dict[str, list[str]]:
    """Tree children per parent, in BFS discovery order."""
    children: dict[str, list[str]] = {}
    for key, info in levels.items():
        if info.parent is None:
            continue
        children.setdefault(info.parent, []).append(key)
    return children


def count_at_depth(levels: dict[str, LevelInfo], depth: int) -> int:
    return sum(1 for info in levels.values() if info.depth == depth)
