"""Pure layout functions: levels, radial placement, clustering and bounds."""

from .cluster import compute_aggregated_edges, compute_grid_clusters, should_cluster
from .geometry import compute_graph_bounds
from .levels import compute_tree_levels
from .radial import (
    compute_radial_layout,
    compute_radial_layout_adaptive,
    compute_radial_layout_advanced,
    compute_radial_layout_dynamic,
    point_on_rect_perimeter,
)

__all__ = [
    "compute_aggregated_edges",
    "compute_grid_clusters",
    "should_cluster",
    "compute_graph_bounds",
    "compute_tree_levels",
    "compute_radial_layout",
    "compute_radial_layout_adaptive",
    "compute_radial_layout_advanced",
    "compute_radial_layout_dynamic",
    "point_on_rect_perimeter",
]
