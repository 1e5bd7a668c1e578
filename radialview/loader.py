"""Graph file loading (JSON and YAML)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .models import Edge, GraphData, Node

logger = logging.getLogger(__name__)

GRAPH_SUFFIXES = {".json", ".yml", ".yaml"}


def _optional_float(raw: dict[str, Any], name: str, where: str) -> float | None:
    value = raw.get(name)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: {name} must be a number, got {value!r}") from None


def _parse_node(raw: Any, index: int) -> Node:
    where = f"nodes[{index}]"
    if isinstance(raw, str):
        return Node(key=raw)
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a mapping or a string key")

    key = raw.get("key", raw.get("id"))
    if key is None or str(key).strip() == "":
        raise ValueError(f"{where}: key is required")

    label = raw.get("text", raw.get("label")) or ""
    return Node(
        key=str(key),
        label=str(label),
        expandable=bool(raw.get("expandable", False)),
        lon=_optional_float(raw, "lon", where),
        lat=_optional_float(raw, "lat", where),
        data=raw.get("data"),
    )


def _parse_edge(raw: Any, index: int) -> Edge:
    where = f"edges[{index}]"
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return Edge(source=str(raw[0]), target=str(raw[1]))
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a mapping or a [source, target] pair")

    source = raw.get("from", raw.get("source"))
    target = raw.get("to", raw.get("target"))
    if source is None or target is None:
        raise ValueError(f"{where}: from/to (or source/target) are required")

    label = raw.get("label")
    color = raw.get("color")
    return Edge(
        source=str(source),
        target=str(target),
        bidirectional=bool(raw.get("bidirectional", False)),
        color=str(color) if color is not None else None,
        thickness=_optional_float(raw, "thickness", where),
        label=str(label) if label is not None else None,
    )


def graph_from_dict(data: Any) -> GraphData:
    """
    Build GraphData from parsed JSON/YAML.

    Duplicate node keys keep the first occurrence. Edges to unknown nodes are
    kept here and dropped later by the layout, which owns that rule.
    """
    if not isinstance(data, dict):
        raise ValueError("graph file must contain a mapping with 'nodes' and 'edges'")

    raw_nodes = data.get("nodes") or []
    raw_edges = data.get("edges") or []
    if not isinstance(raw_nodes, list):
        raise ValueError("nodes must be a list")
    if not isinstance(raw_edges, list):
        raise ValueError("edges must be a list")

    nodes: list[Node] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_nodes):
        node = _parse_node(raw, i)
        if node.key in seen:
            logger.debug("duplicate node key %s ignored", node.key)
            continue
        seen.add(node.key)
        nodes.append(node)

    edges = [_parse_edge(raw, i) for i, raw in enumerate(raw_edges)]

    root = data.get("root")
    if root is not None:
        root = str(root)
        if root not in seen:
            raise ValueError(f"root {root!r} is not a node key")

    return GraphData(nodes=nodes, edges=edges, root=root)


def load_graph(path: Path) -> GraphData:
    """Load a graph file; the format follows the file suffix."""
    suffix = path.suffix.lower()
    if suffix not in GRAPH_SUFFIXES:
        raise ValueError(f"{path}: unsupported graph file type (expected .json, .yml or .yaml)")

    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"{path}: {e}") from e

    try:
        graph = graph_from_dict(data)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e

    logger.debug("loaded %s: %d nodes, %d edges", path, len(graph.nodes), len(graph.edges))
    return graph
