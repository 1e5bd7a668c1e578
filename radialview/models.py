"""Data models for graph nodes, edges and layout results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, NamedTuple

# Valid layout strategies
Strategy = Literal[
    "adaptive",
    "simple",
    "advanced",
    "dynamic",
]

MAX_SUPPORTED_DEPTH = 7


class Point(NamedTuple):
    """A position in world coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Node:
    """A graph node. Only `key` carries identity; everything else is presentational."""

    key: str
    label: str = ""
    expandable: bool = False
    lon: float | None = None  # geographic coordinates (projection is external)
    lat: float | None = None
    data: Any = field(default=None, compare=False, hash=False)

    @property
    def title(self) -> str:
        return self.label or self.key


@dataclass(frozen=True)
class Edge:
    """A graph edge. Directed for rendering, undirected for connectivity."""

    source: str
    target: str
    bidirectional: bool = False
    color: str | None = None
    thickness: float | None = None
    label: str | None = None

    def touches(self, key: str) -> bool:
        return self.source == key or self.target == key

    def other(self, key: str) -> str:
        """Return the endpoint opposite to `key`."""
        return self.target if self.source == key else self.source


@dataclass(frozen=True)
class LevelInfo:
    """BFS depth and discovering parent of a node, relative to a focus."""

    depth: int
    parent: str | None = None


@dataclass
class GraphData:
    """Container for a node list and an edge list."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    root: str | None = None  # optional configured center

    # Lookup table built after loading
    _by_key: dict[str, Node] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self._build_lookups()

    def _build_lookups(self):
        self._by_key = {n.key: n for n in self.nodes}

    def node(self, key: str) -> Node | None:
        """Get node by key."""
        return self._by_key.get(key)

    def has_node(self, key: str) -> bool:
        return key in self._by_key

    def neighbors(self, key: str) -> list[str]:
        """Distinct neighbors of `key` over both edge directions, in edge order.

        Self-loops are excluded; edges whose other endpoint is not a known node
        are ignored.
        """
        seen: dict[str, None] = {}
        for edge in self.edges:
            if not edge.touches(key):
                continue
            other = edge.other(key)
            if other == key or other not in self._by_key:
                continue
            seen.setdefault(other, None)
        return list(seen)

    def is_connected(self, a: str, b: str) -> bool:
        """True if any edge joins `a` and `b` in either direction."""
        return any(
            (e.source == a and e.target == b) or (e.source == b and e.target == a)
            for e in self.edges
        )
