"""Layout command - compute positions and visibility for a graph file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..config import EngineConfig, load_config
from ..layout.levels import compute_tree_levels
from ..loader import load_graph
from ..models import GraphData
from ..view.engine import GraphViewEngine


def _load_inputs(graph_path: Path, config_path: Path | None, console: Console) -> tuple[GraphData, EngineConfig] | None:
    try:
        graph = load_graph(graph_path)
        config = load_config(config_path) if config_path else EngineConfig()
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return None
    return graph, config


def _write_or_print(text: str, out: Path | None, console: Console, what: str) -> None:
    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {what} to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def build_engine(
    graph: GraphData,
    config: EngineConfig,
    *,
    root: str | None = None,
    drill: tuple[str, ...] = (),
    viewport: tuple[float, float] = (1200.0, 800.0),
    zoom: float | None = None,
) -> GraphViewEngine:
    """Build an engine, walk the drill path and settle the deferred fit.

    Raises ValueError when the root is unknown or a drill step is not reachable
    from the focus at that point.
    """
    if root is not None and not graph.has_node(root):
        raise ValueError(f"root {root!r} is not a node key")

    engine = GraphViewEngine(graph, config, root_key=root, viewport=viewport)
    engine.tick()

    for key in drill:
        focus = engine.expansion.focus
        if not engine.activate(key):
            raise ValueError(f"cannot expand {key!r} from focus {focus!r}")
        engine.tick()

    if zoom is not None and zoom > 0:
        engine.zoom_by(zoom / engine.transform.k)

    return engine


def run_layout(
    graph_path: Path,
    *,
    root: str | None = None,
    drill: tuple[str, ...] = (),
    config_path: Path | None = None,
    viewport: tuple[float, float] = (1200.0, 800.0),
    zoom: float | None = None,
    strategy: str | None = None,
    fmt: str = "md",
    out: Path | None = None,
) -> int:
    """Lay out the visible subgraph for a root and drill path, then print or write it."""
    console = Console(stderr=True)

    loaded = _load_inputs(graph_path, config_path, console)
    if loaded is None:
        return 1
    graph, config = loaded

    if strategy:
        config = config.with_layout(strategy=strategy)

    try:
        engine = build_engine(graph, config, root=root, drill=drill, viewport=viewport, zoom=zoom)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    payload = engine.snapshot().to_dict()

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            _print_layout_rich(payload, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote layout to {out}", style="green")
        else:
            _print_layout_rich(payload, console=Console())
        return 0

    if fmt == "json":
        text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    else:
        text = layout_to_markdown(payload)

    _write_or_print(text, out, console, "layout")
    return 0


def layout_to_markdown(payload: dict[str, Any]) -> str:
    lines: list[str] = []
    lines.append(f"# Layout: {payload['focus'] or '(empty)'}")
    lines.append("")
    lines.append(f"- Path: {' > '.join(payload['path'])}")
    lines.append(f"- Strategy: `{payload['strategy']}`")
    lines.append(f"- Visible: {len(payload['visible_nodes'])} nodes, {len(payload['visible_edges'])} edges")
    t = payload["transform"]
    lines.append(f"- Transform: translate({t['x']}, {t['y']}) scale({t['k']}) ({payload['zoom_percent']}%)")
    lines.append("")

    lines.append("## Positions")
    lines.append("")
    lines.append("| Node | x | y |")
    lines.append("|---|---:|---:|")
    for key, p in payload["positions"].items():
        lines.append(f"| {key} | {p['x']:.1f} | {p['y']:.1f} |")
    lines.append("")

    if payload["collapsed"]:
        lines.append("## Collapsed")
        lines.append("")
        for key, info in payload["collapsed"].items():
            lines.append(f"- {key}: {info['hidden_children']} of {info['total_children']} hidden")
        lines.append("")

    if payload["clusters"]:
        lines.append("## Clusters")
        lines.append("")
        for g in payload["clusters"]:
            lines.append(f"- `{g['key']}` ({len(g['members'])}): {', '.join(g['members'])}")
        for a in payload["aggregated_edges"]:
            lines.append(f"- `{a['source']}` -> `{a['target']}` x{a['count']}")
        lines.append("")

    return "\n".join(lines)


def _print_layout_rich(payload: dict[str, Any], *, console: Console) -> None:
    console.print(f"[bold]{' > '.join(payload['path']) or '(empty)'}[/bold]")
    console.print(
        f"[dim]strategy[/dim] {payload['strategy']}  "
        f"[dim]zoom[/dim] {payload['zoom_percent']}%  "
        f"[dim]visible[/dim] {len(payload['visible_nodes'])}/{len(payload['visible_edges'])}"
    )

    table = Table(title="Positions")
    table.add_column("Node", style="bold")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Hidden", justify="right")
    for key, p in payload["positions"].items():
        info = payload["collapsed"].get(key)
        table.add_row(key, f"{p['x']:.1f}", f"{p['y']:.1f}", str(info["hidden_children"]) if info else "")
    console.print(table)

    if payload["clusters"]:
        ct = Table(title="Clusters")
        ct.add_column("Group")
        ct.add_column("Size", justify="right")
        ct.add_column("Members")
        for g in payload["clusters"]:
            ct.add_row(g["key"], str(len(g["members"])), ", ".join(g["members"]))
        console.print(ct)


def run_levels(
    graph_path: Path,
    *,
    root: str | None = None,
    max_depth: int = 7,
    fmt: str = "md",
    out: Path | None = None,
) -> int:
    """BFS depth and parent of every node reachable from the root."""
    console = Console(stderr=True)

    loaded = _load_inputs(graph_path, None, console)
    if loaded is None:
        return 1
    graph, _ = loaded

    center = root or graph.root or (graph.nodes[0].key if graph.nodes else None)
    if center is None or not graph.has_node(center):
        console.print(f"[red]Error:[/red] root {center!r} is not a node key")
        return 1

    levels = compute_tree_levels(graph.nodes, graph.edges, center, max_depth)
    rows = [
        {"key": n.key, "depth": levels[n.key].depth, "parent": levels[n.key].parent}
        for n in graph.nodes
        if n.key in levels
    ]
    rows.sort(key=lambda r: (r["depth"], r["key"]))
    unreached = [n.key for n in graph.nodes if n.key not in levels]

    payload = {"root": center, "max_depth": max_depth, "levels": rows, "unreached": unreached}

    if fmt == "rich":
        table = Table(title=f"Levels from {center}")
        table.add_column("Depth", justify="right")
        table.add_column("Node", style="bold")
        table.add_column("Parent")
        for r in rows:
            table.add_row(str(r["depth"]), r["key"], r["parent"] or "")
        Console().print(table)
        if unreached:
            console.print(f"[dim]{len(unreached)} node(s) beyond depth {max_depth} or disconnected[/dim]")
        return 0

    if fmt == "json":
        text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    else:
        lines = [f"# Levels from {center} (max depth {max_depth})", ""]
        lines.append("| Depth | Node | Parent |")
        lines.append("|---:|---|---|")
        for r in rows:
            lines.append(f"| {r['depth']} | {r['key']} | {r['parent'] or ''} |")
        if unreached:
            lines.append("")
            lines.append(f"Unreached: {', '.join(unreached)}")
        text = "\n".join(lines) + "\n"

    _write_or_print(text, out, console, "levels")
    return 0
