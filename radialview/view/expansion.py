"""Breadcrumb-style expansion path and the visibility it implies."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import Edge, GraphData, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollapsedInfo:
    total_children: int
    hidden_children: int


class ExpansionState:
    """
    Ordered path of focused nodes, starting at the root.

    The last element is the focus. Visible nodes are the path itself plus every
    neighbor of the focus; ancestors stay visible as a trail but are not expanded.
    """

    def __init__(self, graph: GraphData, root_key: str):
        self.graph = graph
        self.root_key = root_key
        self._path: list[str] = [root_key]

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self._path)

    @property
    def focus(self) -> str:
        return self._path[-1]

    @property
    def depth(self) -> int:
        return len(self._path)

    def can_drill_down(self, key: str) -> bool:
        if key == self.root_key or key in self._path:
            return False
        if not self.graph.has_node(key):
            return False
        # full edge set, not the visible subgraph
        return self.graph.is_connected(self.focus, key)

    def drill_down(self, key: str) -> bool:
        if not self.can_drill_down(key):
            logger.debug("drill down to %s rejected (focus=%s)", key, self.focus)
            return False
        self._path.append(key)
        return True

    def drill_up(self, key: str) -> bool:
        if key not in self._path:
            return False
        i = self._path.index(key)
        if i == len(self._path) - 1:
            return False
        del self._path[i + 1 :]
        return True

    def activate(self, key: str) -> bool:
        """Single entry point for an expand action on a node."""
        if key in self._path:
            return self.drill_up(key)
        return self.drill_down(key)

    def reset(self, graph: GraphData | None = None, root_key: str | None = None) -> None:
        if graph is not None:
            self.graph = graph
        if root_key is not None:
            self.root_key = root_key
        self._path = [self.root_key]

    def prune(self) -> list[str]:
        """
        Drop path entries that are no longer reachable along the path.

        The first entry that is missing from the graph or no longer connected to
        its predecessor is removed together with everything after it. Returns the
        removed keys.
        """
        if not self.graph.has_node(self.root_key):
            removed = self._path[1:]
            self._path = [self.root_key]
            return removed

        for i in range(1, len(self._path)):
            prev, key = self._path[i - 1], self._path[i]
            if not self.graph.has_node(key) or not self.graph.is_connected(prev, key):
                removed = self._path[i:]
                del self._path[i:]
                logger.debug("pruned stale path entries: %s", removed)
                return removed
        return []

    def visible_node_keys(self) -> set[str]:
        keys = {k for k in self._path if self.graph.has_node(k)}
        keys.update(self.graph.neighbors(self.focus))
        return keys

    def visible_nodes(self) -> list[Node]:
        keys = self.visible_node_keys()
        return [n for n in self.graph.nodes if n.key in keys]

    def visible_edges(self) -> list[Edge]:
        keys = self.visible_node_keys()
        return [e for e in self.graph.edges if e.source in keys and e.target in keys]

    def collapsed_info(self) -> dict[str, CollapsedInfo]:
        """Hidden-neighbor counts for breadcrumb nodes, only where something is hidden."""
        visible = self.visible_node_keys()
        info: dict[str, CollapsedInfo] = {}
        for key in self._path[:-1]:
            neighbors = self.graph.neighbors(key)
            hidden = sum(1 for nb in neighbors if nb not in visible)
            if hidden > 0:
                info[key] = CollapsedInfo(total_children=len(neighbors), hidden_children=hidden)
        return info
