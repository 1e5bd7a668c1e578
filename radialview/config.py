"""Engine configuration: dataclass defaults, clamping and TOML loading."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .layout.geometry import NodeBox, clamp
from .models import MAX_SUPPORTED_DEPTH, Strategy

STRATEGIES: tuple[str, ...] = ("adaptive", "simple", "advanced", "dynamic")


@dataclass(frozen=True)
class LayoutConfig:
    max_depth: int = MAX_SUPPORTED_DEPTH
    child_spread_deg: float = 80.0
    level_radii: dict[int, float] = field(default_factory=dict)  # per-level overrides
    strategy: Strategy = "adaptive"
    rect_rings_min_lvl1: int = 20  # host wiring; choose_layout_mode alone defaults to 80
    outer_ratio: float = 0.55
    inner_scale: float = 0.72
    node_box: NodeBox = field(default_factory=lambda: NodeBox(pad=25.0))

    def __post_init__(self) -> None:
        # out-of-range values are clamped, not rejected
        object.__setattr__(self, "max_depth", int(clamp(int(self.max_depth), 1, MAX_SUPPORTED_DEPTH)))
        object.__setattr__(self, "outer_ratio", clamp(float(self.outer_ratio), 0.05, 0.95))
        object.__setattr__(self, "inner_scale", clamp(float(self.inner_scale), 0.2, 0.98))
        object.__setattr__(self, "child_spread_deg", clamp(float(self.child_spread_deg), 0.0, 360.0))


@dataclass(frozen=True)
class ClusterConfig:
    enabled: bool = True
    grid_size: float = 160.0  # world units
    zoom_threshold: float = 0.9

    def __post_init__(self) -> None:
        object.__setattr__(self, "grid_size", max(1.0, float(self.grid_size)))


@dataclass(frozen=True)
class ViewConfig:
    min_zoom: float = 0.25
    max_zoom: float = 3.0
    fit_padding: float = 5.0

    def __post_init__(self) -> None:
        lo, hi = float(self.min_zoom), float(self.max_zoom)
        if lo <= 0:
            lo = 0.01
        if hi < lo:
            lo, hi = hi, lo
        object.__setattr__(self, "min_zoom", lo)
        object.__setattr__(self, "max_zoom", hi)


@dataclass(frozen=True)
class EngineConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    view: ViewConfig = field(default_factory=ViewConfig)

    def with_layout(self, **changes: Any) -> "EngineConfig":
        return replace(self, layout=replace(self.layout, **changes))


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_radii(raw: Any) -> dict[int, float]:
    radii: dict[int, float] = {}
    for k, v in _coerce_dict(raw).items():
        try:
            level = int(k)
            radius = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"level_radii entries must be numeric, got {k!r} = {v!r}") from None
        if 1 <= level <= MAX_SUPPORTED_DEPTH:
            radii[level] = radius
    return radii


def config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """
    Build an EngineConfig from parsed TOML data.

    Unknown keys are ignored; type errors on known keys raise ValueError.
    """
    layout_raw = _coerce_dict(data.get("layout"))
    cluster_raw = _coerce_dict(data.get("cluster"))
    view_raw = _coerce_dict(data.get("view"))

    strategy = str(layout_raw.get("strategy", "adaptive")).strip() or "adaptive"
    if strategy not in STRATEGIES:
        raise ValueError(f"strategy must be one of: {', '.join(STRATEGIES)}")

    box_raw = _coerce_dict(layout_raw.get("node_box"))
    defaults = LayoutConfig()
    try:
        layout = LayoutConfig(
            max_depth=int(layout_raw.get("max_depth", defaults.max_depth)),
            child_spread_deg=float(layout_raw.get("child_spread_deg", defaults.child_spread_deg)),
            level_radii=_coerce_radii(layout_raw.get("level_radii")),
            strategy=strategy,  # type: ignore[arg-type]
            rect_rings_min_lvl1=int(layout_raw.get("rect_rings_min_lvl1", defaults.rect_rings_min_lvl1)),
            outer_ratio=float(layout_raw.get("outer_ratio", defaults.outer_ratio)),
            inner_scale=float(layout_raw.get("inner_scale", defaults.inner_scale)),
            node_box=NodeBox(
                w=float(box_raw.get("w", defaults.node_box.w)),
                h=float(box_raw.get("h", defaults.node_box.h)),
                pad=float(box_raw.get("pad", defaults.node_box.pad)),
            ),
        )
        cluster = ClusterConfig(
            enabled=bool(cluster_raw.get("enabled", True)),
            grid_size=float(cluster_raw.get("grid_size", ClusterConfig.grid_size)),
            zoom_threshold=float(cluster_raw.get("zoom_threshold", ClusterConfig.zoom_threshold)),
        )
        view = ViewConfig(
            min_zoom=float(view_raw.get("min_zoom", ViewConfig.min_zoom)),
            max_zoom=float(view_raw.get("max_zoom", ViewConfig.max_zoom)),
            fit_padding=float(view_raw.get("fit_padding", ViewConfig.fit_padding)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid config value: {e}") from e

    return EngineConfig(layout=layout, cluster=cluster, view=view)


def load_config(path: Path) -> EngineConfig:
    """
    Load engine configuration from TOML.

    The schema is small: three optional tables, `[layout]`, `[cluster]` and `[view]`.
    """
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{path}: {e}") from e
    return config_from_dict(data)
