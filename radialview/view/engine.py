"""Host pipeline tying expansion, layout, clustering and viewport together.

Everything is recomputed top to bottom on the events that need it:

    expansion path -> visible subgraph -> levels + layout -> positions
        -> clusters (when zoomed out) and fit (deferred, after transitions)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from ..config import EngineConfig
from ..layout.cluster import (
    AggregatedEdge,
    ClusterResult,
    compute_aggregated_edges,
    compute_grid_clusters,
    should_cluster,
)
from ..layout.radial import (
    RectRingsLayout,
    choose_layout_mode,
    compute_radial_layout,
    compute_radial_layout_advanced,
    compute_radial_layout_dynamic,
    default_level_radii,
    rect_half_extents_for_viewport,
)
from ..models import Edge, GraphData, Node, Point
from .expansion import CollapsedInfo, ExpansionState
from .positions import PositionStore
from .scheduler import DeferredTask
from .viewport import (
    ViewTransform,
    fit_transform,
    pan_by,
    reset_transform,
    resize_transform,
    zoom_by,
    zoom_in,
    zoom_out,
    zoom_percent,
    zoom_to_world_point,
)

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = (1200.0, 800.0)
GROUP_ZOOM_FACTOR = 1.35


@dataclass
class ViewSnapshot:
    """Everything a renderer needs for one frame."""

    root: str
    path: tuple[str, ...]
    focus: str
    strategy: str
    visible_nodes: list[Node]
    visible_edges: list[Edge]
    positions: dict[str, Point]
    collapsed: dict[str, CollapsedInfo]
    transform: ViewTransform
    zoom_percent: int
    clusters: ClusterResult | None = None
    aggregated_edges: list[AggregatedEdge] = field(default_factory=list)
    layout_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "path": list(self.path),
            "focus": self.focus,
            "strategy": self.strategy,
            "visible_nodes": [
                {"key": n.key, "label": n.title, "expandable": n.expandable} for n in self.visible_nodes
            ],
            "visible_edges": [
                {"source": e.source, "target": e.target, "bidirectional": e.bidirectional}
                for e in self.visible_edges
            ],
            "positions": {k: {"x": round(p.x, 3), "y": round(p.y, 3)} for k, p in self.positions.items()},
            "collapsed": {
                k: {"total_children": c.total_children, "hidden_children": c.hidden_children}
                for k, c in self.collapsed.items()
            },
            "transform": {
                "x": round(self.transform.x, 3),
                "y": round(self.transform.y, 3),
                "k": round(self.transform.k, 4),
            },
            "zoom_percent": self.zoom_percent,
            "clusters": [
                {
                    "key": g.key,
                    "members": list(g.members),
                    "center": {"x": round(g.center.x, 3), "y": round(g.center.y, 3)},
                }
                for g in (self.clusters.groups if self.clusters else [])
            ],
            "aggregated_edges": [
                {"source": a.source, "target": a.target, "count": a.count} for a in self.aggregated_edges
            ],
        }


def _pick_root(graph: GraphData, root_key: str | None) -> str:
    if root_key:
        return root_key
    if graph.root:
        return graph.root
    return graph.nodes[0].key if graph.nodes else ""


class GraphViewEngine:
    """
    Owns the view state of one rendered graph and accepts host commands.

    Single-threaded: commands run synchronously, except the fit that follows
    an expansion transition, which waits for `tick()`.
    """

    def __init__(
        self,
        graph: GraphData,
        config: EngineConfig | None = None,
        *,
        root_key: str | None = None,
        viewport: tuple[float, float] = DEFAULT_VIEWPORT,
    ):
        self.graph = graph
        self.config = config or EngineConfig()
        self.width, self.height = float(viewport[0]), float(viewport[1])

        self.expansion = ExpansionState(graph, _pick_root(graph, root_key))
        self.positions = PositionStore()
        self.deferred = DeferredTask()
        self.transform = reset_transform(self.width, self.height)

        self.dragging = False
        self.initial_fit_done = False
        self.strategy_used = ""
        self.layout_ms = 0.0

        self.recompute_layout(structural=True)
        self.deferred.schedule(self.expansion.path, self._deferred_fit)

    @property
    def root_key(self) -> str:
        return self.expansion.root_key

    # -- layout -------------------------------------------------------------

    def _is_expandable(self, n: Node) -> bool:
        return n.expandable and n.key != self.root_key

    def compute_layout(self) -> dict[str, Point]:
        """Pure layout of the current visible subgraph, centered on the focus."""
        cfg = self.config.layout
        nodes = self.expansion.visible_nodes()
        edges = self.expansion.visible_edges()
        focus = self.expansion.focus
        radii = default_level_radii(self.width, self.height, cfg.level_radii)

        strategy = cfg.strategy
        if strategy == "adaptive":
            strategy, lvl1_count = choose_layout_mode(nodes, edges, focus, cfg.rect_rings_min_lvl1)
            logger.debug("adaptive layout picked %s (lvl1_count=%d)", strategy, lvl1_count)
        self.strategy_used = strategy

        if strategy == "dynamic":
            return compute_radial_layout_dynamic(nodes, edges, focus, cfg.max_depth, radii, node_box=cfg.node_box)

        if strategy == "simple":
            return compute_radial_layout(nodes, edges, focus, cfg.max_depth, radii, cfg.child_spread_deg)

        half_w, half_h = rect_half_extents_for_viewport(self.width, self.height, cfg.node_box)
        rings = RectRingsLayout(
            half_w=half_w,
            half_h=half_h,
            outer_ratio=cfg.outer_ratio,
            inner_scale=cfg.inner_scale,
        )
        return compute_radial_layout_advanced(
            nodes,
            edges,
            focus,
            cfg.max_depth,
            radii,
            cfg.child_spread_deg,
            level1_layout=rings,
            is_expandable=self._is_expandable,
            node_box=cfg.node_box,
        )

    def recompute_layout(self, *, structural: bool = False) -> dict[str, Point]:
        """
        Recompute positions for the visible subgraph.

        A structural recompute (focus or data change) replaces every position;
        otherwise dragged nodes keep their positions.
        """
        start = time.perf_counter()
        layout = self.compute_layout()
        self.layout_ms = (time.perf_counter() - start) * 1000

        if structural:
            self.positions.replace_all(layout)
        else:
            self.positions.merged_with(layout)

        logger.debug(
            "layout: strategy=%s nodes=%d structural=%s in %.2fms",
            self.strategy_used,
            len(layout),
            structural,
            self.layout_ms,
        )
        return self.positions.snapshot()

    # -- expansion ------------------------------------------------------------

    def _after_transition(self) -> None:
        self.recompute_layout(structural=True)
        self.deferred.schedule(self.expansion.path, self._deferred_fit)

    def drill_down(self, key: str) -> bool:
        if not self.expansion.drill_down(key):
            return False
        self._after_transition()
        return True

    def drill_up(self, key: str) -> bool:
        if not self.expansion.drill_up(key):
            return False
        self._after_transition()
        return True

    def activate(self, key: str) -> bool:
        if key in self.expansion.path:
            return self.drill_up(key)
        return self.drill_down(key)

    def update_graph(self, graph: GraphData, *, root_key: str | None = None, preserve_path: bool = False) -> None:
        """Swap in new graph data. The path resets to the root unless `preserve_path` is set."""
        self.graph = graph
        keep = self.root_key if graph.has_node(self.root_key) else None
        new_root = _pick_root(graph, root_key or keep)
        root_changed = new_root != self.expansion.root_key

        if preserve_path and not root_changed:
            self.expansion.graph = graph
            self.expansion.prune()
        else:
            self.expansion.reset(graph, new_root)

        self.recompute_layout(structural=True)
        self.deferred.schedule(self.expansion.path, self._deferred_fit)

    # -- viewport -------------------------------------------------------------

    def _fit(self) -> bool:
        view = self.config.view
        t = fit_transform(
            self.positions.snapshot(),
            self.width,
            self.height,
            min_zoom=view.min_zoom,
            max_zoom=view.max_zoom,
            padding=view.fit_padding,
            first_fit=not self.initial_fit_done,
            box_w=self.config.layout.node_box.w,
            box_h=self.config.layout.node_box.h,
        )
        if t is None:
            return False
        self.transform = t
        return True

    def _deferred_fit(self) -> None:
        if self._fit():
            self.initial_fit_done = True

    def fit_to_content(self) -> bool:
        self.deferred.cancel()
        fitted = self._fit()
        if fitted:
            self.initial_fit_done = True
        return fitted

    def reset_view(self) -> ViewTransform:
        self.transform = reset_transform(self.width, self.height)
        return self.transform

    def zoom_by(self, factor: float) -> ViewTransform:
        if self.width <= 0 or self.height <= 0:
            return self.transform
        view = self.config.view
        self.transform = zoom_by(
            self.transform, factor, self.width, self.height, min_zoom=view.min_zoom, max_zoom=view.max_zoom
        )
        return self.transform

    def _step_zoom(self, step) -> ViewTransform:
        if self.width <= 0 or self.height <= 0:
            return self.transform
        view = self.config.view
        self.transform = step(self.transform, self.width, self.height, min_zoom=view.min_zoom, max_zoom=view.max_zoom)
        return self.transform

    def zoom_in(self) -> ViewTransform:
        return self._step_zoom(zoom_in)

    def zoom_out(self) -> ViewTransform:
        return self._step_zoom(zoom_out)

    def zoom_to(self, wx: float, wy: float, k: float) -> ViewTransform:
        view = self.config.view
        self.transform = zoom_to_world_point(
            wx, wy, k, self.width, self.height, min_zoom=view.min_zoom, max_zoom=view.max_zoom
        )
        return self.transform

    def zoom_into_group(self, group_key: str) -> bool:
        """Center a cluster group, zooming far enough in to break it apart."""
        clusters, _ = self.clusters()
        if clusters is None:
            return False
        group = next((g for g in clusters.groups if g.key == group_key), None)
        if group is None:
            return False
        k = max(self.transform.k * GROUP_ZOOM_FACTOR, self.config.cluster.zoom_threshold * 1.25)
        self.zoom_to(group.center.x, group.center.y, k)
        return True

    def pan_by(self, dx: float, dy: float) -> ViewTransform:
        self.transform = pan_by(self.transform, dx, dy)
        return self.transform

    def resize(self, width: float, height: float) -> None:
        old = (self.width, self.height)
        self.width, self.height = float(width), float(height)
        self.transform = resize_transform(self.transform, old, (self.width, self.height))
        # radii and ring extents depend on the viewport
        self.recompute_layout(structural=False)

    # -- dragging -------------------------------------------------------------

    def begin_drag(self) -> None:
        self.dragging = True

    def end_drag(self) -> None:
        self.dragging = False

    def set_node_position(self, key: str, x: float, y: float) -> bool:
        if key not in self.positions:
            return False
        self.positions.override(key, Point(x, y))
        return True

    # -- host loop ------------------------------------------------------------

    def tick(self) -> bool:
        """Run the deferred fit, if one is pending."""
        return self.deferred.run_pending()

    def clusters(self) -> tuple[ClusterResult | None, list[AggregatedEdge]]:
        cfg = self.config.cluster
        if not cfg.enabled:
            return None, []
        if not should_cluster(self.transform.k, threshold=cfg.zoom_threshold, dragging=self.dragging):
            return None, []

        nodes = self.expansion.visible_nodes()
        result = compute_grid_clusters(nodes, self.positions.snapshot(), cfg.grid_size)
        aggregated = compute_aggregated_edges(
            self.expansion.visible_edges(), result.node_to_group, result.group_sizes()
        )
        return result, aggregated

    def snapshot(self) -> ViewSnapshot:
        clusters, aggregated = self.clusters()
        return ViewSnapshot(
            root=self.root_key,
            path=self.expansion.path,
            focus=self.expansion.focus,
            strategy=self.strategy_used,
            visible_nodes=self.expansion.visible_nodes(),
            visible_edges=self.expansion.visible_edges(),
            positions=self.positions.snapshot(),
            collapsed=self.expansion.collapsed_info(),
            transform=self.transform,
            zoom_percent=zoom_percent(self.transform),
            clusters=clusters,
            aggregated_edges=aggregated,
            layout_ms=self.layout_ms,
        )
