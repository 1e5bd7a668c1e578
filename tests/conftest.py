"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from radialview.models import Edge, GraphData, Node


@pytest.fixture
def small_graph() -> GraphData:
    """CENTER with two children; A has one child of its own."""
    return GraphData(
        nodes=[Node("CENTER"), Node("A", expandable=True), Node("B"), Node("C")],
        edges=[Edge("CENTER", "A"), Edge("CENTER", "B"), Edge("A", "C")],
    )


@pytest.fixture
def star_graph() -> GraphData:
    """Hub with 30 leaves, every fifth one expandable with two children."""
    nodes = [Node("hub")]
    edges = []
    for i in range(30):
        key = f"n{i:02d}"
        nodes.append(Node(key, expandable=i % 5 == 0))
        edges.append(Edge("hub", key))
        if i % 5 == 0:
            for j in range(2):
                child = f"{key}-c{j}"
                nodes.append(Node(child))
                edges.append(Edge(key, child))
    return GraphData(nodes=nodes, edges=edges)


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """The small graph written as JSON with from/to edge keys."""
    path = tmp_path / "graph.json"
    path.write_text(
        json.dumps(
            {
                "root": "CENTER",
                "nodes": [
                    {"key": "CENTER", "text": "Center"},
                    {"key": "A", "text": "Alpha", "expandable": True},
                    {"key": "B"},
                    {"key": "C"},
                ],
                "edges": [
                    {"from": "CENTER", "to": "A"},
                    {"from": "CENTER", "to": "B"},
                    {"from": "A", "to": "C"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path
