"""CLI entrypoint for radialview."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import STRATEGIES


def _parse_viewport(ctx: click.Context, param: click.Parameter, value: str) -> tuple[float, float]:
    """Parse WIDTHxHEIGHT."""
    try:
        w_str, h_str = value.lower().split("x", 1)
        w, h = float(w_str), float(h_str)
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got '{value}'") from None
    if w <= 0 or h <= 0:
        raise click.BadParameter("viewport dimensions must be positive")
    return w, h


GRAPH_ARG = click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
ROOT_OPT = click.option("--root", type=str, default=None, help="Root node key (defaults to the file's root or first node)")
DRILL_OPT = click.option(
    "--drill",
    "drill",
    multiple=True,
    metavar="KEY",
    help="Expand into KEY from the current focus. Repeatable; applied in order.",
)
CONFIG_OPT = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML config with [layout], [cluster] and [view] tables",
)
VIEWPORT_OPT = click.option(
    "--viewport",
    default="1200x800",
    show_default=True,
    callback=_parse_viewport,
    help="Viewport size in pixels, WIDTHxHEIGHT",
)
OUT_OPT = click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")


@click.group()
@click.version_option(__version__, prog_name="radialview")
@click.option("--verbose", is_flag=True, help="Log layout decisions to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """radialview - radial layout and progressive disclosure for node-link graphs.

    Compute positions, visible subgraphs and viewport transforms from graph files.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.command()
@GRAPH_ARG
@ROOT_OPT
@DRILL_OPT
@CONFIG_OPT
@VIEWPORT_OPT
@click.option("--zoom", type=float, default=None, help="Zoom level to apply after fitting (e.g. 0.5)")
@click.option(
    "--strategy",
    type=click.Choice(list(STRATEGIES)),
    default=None,
    help="Override the layout strategy from config",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "json", "rich"]),
    default="md",
    show_default=True,
    help="Output format",
)
@OUT_OPT
@click.pass_context
def layout(
    ctx: click.Context,
    graph: Path,
    root: str | None,
    drill: tuple[str, ...],
    config_path: Path | None,
    viewport: tuple[float, float],
    zoom: float | None,
    strategy: str | None,
    fmt: str,
    out: Path | None,
) -> None:
    """Lay out the visible subgraph and print positions.

    Examples:

        radialview layout graph.json

        radialview layout graph.yml --drill A --drill C --format json

        radialview layout graph.json --zoom 0.5 --format rich
    """
    from .commands.layout_cmd import run_layout

    exit_code = run_layout(
        graph,
        root=root,
        drill=drill,
        config_path=config_path,
        viewport=viewport,
        zoom=zoom,
        strategy=strategy,
        fmt=fmt,
        out=out,
    )
    sys.exit(exit_code)


@cli.command()
@GRAPH_ARG
@ROOT_OPT
@click.option(
    "--max-depth",
    type=click.IntRange(1, 7),
    default=7,
    show_default=True,
    help="Deepest BFS level to assign",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "json", "rich"]),
    default="md",
    show_default=True,
    help="Output format",
)
@OUT_OPT
@click.pass_context
def levels(
    ctx: click.Context,
    graph: Path,
    root: str | None,
    max_depth: int,
    fmt: str,
    out: Path | None,
) -> None:
    """Show BFS depth and parent of every node reachable from the root."""
    from .commands.layout_cmd import run_levels

    sys.exit(run_levels(graph, root=root, max_depth=max_depth, fmt=fmt, out=out))


@cli.command()
@GRAPH_ARG
@ROOT_OPT
@DRILL_OPT
@CONFIG_OPT
@VIEWPORT_OPT
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "json"]),
    default="json",
    show_default=True,
    help="Output format",
)
@OUT_OPT
@click.pass_context
def watch(
    ctx: click.Context,
    graph: Path,
    root: str | None,
    drill: tuple[str, ...],
    config_path: Path | None,
    viewport: tuple[float, float],
    fmt: str,
    out: Path | None,
) -> None:
    """Recompute the layout whenever the graph (or config) file changes.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    run_watch(
        graph,
        root=root,
        drill=drill,
        config_path=config_path,
        viewport=viewport,
        fmt=fmt,
        out=out,
    )


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
