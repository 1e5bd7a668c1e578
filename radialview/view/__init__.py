"""View state: expansion path, positions, viewport and the engine that drives them."""

from .engine import GraphViewEngine, ViewSnapshot
from .expansion import CollapsedInfo, ExpansionState
from .positions import PositionStore
from .scheduler import DeferredTask
from .viewport import ViewTransform, fit_transform

__all__ = [
    "GraphViewEngine",
    "ViewSnapshot",
    "CollapsedInfo",
    "ExpansionState",
    "PositionStore",
    "DeferredTask",
    "ViewTransform",
    "fit_transform",
]
