"""Watch command - recompute the layout whenever the graph file changes."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..config import EngineConfig, load_config
from ..loader import load_graph
from ..watcher import run_watch_loop
from .layout_cmd import build_engine, layout_to_markdown


def render_once(
    graph_path: Path,
    *,
    root: str | None = None,
    drill: tuple[str, ...] = (),
    config_path: Path | None = None,
    viewport: tuple[float, float] = (1200.0, 800.0),
    fmt: str = "json",
) -> str:
    """Load, lay out and render to text. Raises ValueError/OSError on bad input."""
    graph = load_graph(graph_path)
    config = load_config(config_path) if config_path else EngineConfig()
    engine = build_engine(graph, config, root=root, drill=drill, viewport=viewport)
    payload = engine.snapshot().to_dict()
    if fmt == "json":
        return json.dumps(payload, indent=2, sort_keys=True) + "\n"
    return layout_to_markdown(payload)


def run_watch(
    graph_path: Path,
    *,
    root: str | None = None,
    drill: tuple[str, ...] = (),
    config_path: Path | None = None,
    viewport: tuple[float, float] = (1200.0, 800.0),
    fmt: str = "json",
    out: Path | None = None,
) -> None:
    """
    Watch a graph file and re-emit its layout on every change.

    This is a blocking command that runs until interrupted (Ctrl+C). A broken
    intermediate save is reported and the previous output is left in place.
    """
    console = Console(stderr=True)

    console.print(f"[bold]Watching[/bold] {graph_path}")
    if config_path:
        console.print(f"  Config: {config_path}")
    if out:
        console.print(f"  Output: {out}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    render_count = 0

    def emit(_: Path | None = None) -> None:
        nonlocal render_count
        timestamp = datetime.now().strftime("%H:%M:%S")
        try:
            text = render_once(
                graph_path, root=root, drill=drill, config_path=config_path, viewport=viewport, fmt=fmt
            )
        except (OSError, ValueError) as e:
            console.print(f"[dim]{timestamp}[/dim] [red]Error:[/red] {e}")
            return

        render_count += 1
        if out:
            out.write_text(text, encoding="utf-8")
            console.print(f"[dim]{timestamp}[/dim] wrote {out}")
        else:
            print(text, end="" if text.endswith("\n") else "\n")

    emit()

    watched = [graph_path] + ([config_path] if config_path else [])
    try:
        run_watch_loop(watched, emit)
    except KeyboardInterrupt:
        console.print()

    console.print(f"[bold]Stopped.[/bold] Rendered {render_count} times.")
