"""radialview - radial layout, clustering and progressive disclosure for node-link graphs."""

__version__ = "0.1.0"

from .config import ClusterConfig, EngineConfig, LayoutConfig, ViewConfig, load_config
from .loader import load_graph
from .models import Edge, GraphData, LevelInfo, Node, Point
from .view.engine import GraphViewEngine, ViewSnapshot

__all__ = [
    "__version__",
    "ClusterConfig",
    "EngineConfig",
    "LayoutConfig",
    "ViewConfig",
    "load_config",
    "load_graph",
    "Edge",
    "GraphData",
    "LevelInfo",
    "Node",
    "Point",
    "GraphViewEngine",
    "ViewSnapshot",
]
