import math

import pytest

from radialview.layout.geometry import NodeBox
from radialview.layout.levels import compute_tree_levels
from radialview.layout.radial import (
    RING_U_OFFSET,
    RectRingsLayout,
    choose_layout_mode,
    compute_child_radius,
    compute_radial_layout,
    compute_radial_layout_adaptive,
    compute_radial_layout_advanced,
    compute_radial_layout_dynamic,
    default_level_radii,
    point_on_rect_perimeter,
    rect_outward_normal,
)
from radialview.models import Edge, GraphData, Node, Point

RADII = {1: 100.0, 2: 50.0}


def _expandable(n: Node) -> bool:
    return n.expandable


def test_simple_layout_small_graph(small_graph: GraphData) -> None:
    pos = compute_radial_layout(small_graph.nodes, small_graph.edges, "CENTER", 2, RADII, 80)

    assert pos["CENTER"] == Point(0.0, 0.0)
    assert pos["A"] == pytest.approx((100.0, 0.0))
    assert pos["B"] == pytest.approx((-100.0, 0.0), abs=1e-9)
    # a single child sits on its parent's outward angle
    assert pos["C"] == pytest.approx((150.0, 0.0))


def test_every_leveled_node_gets_a_position(star_graph: GraphData) -> None:
    levels = compute_tree_levels(star_graph.nodes, star_graph.edges, "hub", 7)
    pos = compute_radial_layout(star_graph.nodes, star_graph.edges, "hub", 7, RADII, 80)

    assert set(pos) == set(levels)


def test_unknown_center_gives_no_positions(small_graph: GraphData) -> None:
    assert compute_radial_layout(small_graph.nodes, small_graph.edges, "nope", 2, RADII, 80) == {}
    assert compute_radial_layout_advanced(small_graph.nodes, small_graph.edges, "nope", 2, RADII, 80) == {}
    assert compute_radial_layout_dynamic(small_graph.nodes, small_graph.edges, "nope", 2, RADII) == {}


def test_layout_is_deterministic(star_graph: GraphData) -> None:
    rings = RectRingsLayout(half_w=300, half_h=200)

    def run() -> dict[str, Point]:
        return compute_radial_layout_adaptive(
            star_graph.nodes,
            star_graph.edges,
            "hub",
            7,
            RADII,
            80,
            rect_rings_min_lvl1=20,
            level1_layout=rings,
            is_expandable=_expandable,
            node_box=NodeBox(pad=25),
        )

    assert run() == run()


def test_perimeter_walk_starts_at_right_midpoint() -> None:
    assert point_on_rect_perimeter(0.0, 100, 50) == pytest.approx((100.0, 0.0))
    assert point_on_rect_perimeter(0.25, 100, 50) == pytest.approx((0.0, 50.0))
    assert point_on_rect_perimeter(1.0, 100, 50) == pytest.approx((100.0, 0.0))
    assert point_on_rect_perimeter(-0.75, 100, 50) == pytest.approx((0.0, 50.0))


def test_rect_ring_places_expandable_nodes_on_outer_perimeter() -> None:
    keys = ["a", "b", "c", "d"]
    nodes = [Node("root")] + [Node(k, expandable=True) for k in keys]
    edges = [Edge("root", k) for k in keys]

    pos = compute_radial_layout_advanced(
        nodes,
        edges,
        "root",
        2,
        RADII,
        80,
        level1_layout=RectRingsLayout(half_w=200, half_h=200),
        is_expandable=_expandable,
    )

    for i, key in enumerate(keys):
        expected = point_on_rect_perimeter(i / 4 + RING_U_OFFSET, 200, 200)
        assert pos[key] == pytest.approx(expected)


def test_rect_ring_splits_leaves_into_inner_ring() -> None:
    keys = [f"k{i}" for i in range(10)]
    nodes = [Node("root")] + [Node(k) for k in keys]
    edges = [Edge("root", k) for k in keys]

    pos = compute_radial_layout_advanced(
        nodes,
        edges,
        "root",
        1,
        RADII,
        80,
        level1_layout=RectRingsLayout(half_w=200, half_h=200, outer_ratio=0.5, inner_scale=0.5),
    )

    outer = [pos[k] for k in keys[:5]]
    inner = [pos[k] for k in keys[5:]]
    assert all(max(abs(p.x), abs(p.y)) == pytest.approx(200) for p in outer)
    assert all(max(abs(p.x), abs(p.y)) == pytest.approx(100) for p in inner)


def test_rect_extents_have_a_floor() -> None:
    assert RectRingsLayout(half_w=10, half_h=500).extents(RADII) == (120.0, 500.0)
    assert RectRingsLayout().extents({1: 130.0}) == (130.0, 130.0)


def test_outward_normal_picks_nearest_side() -> None:
    assert rect_outward_normal(Point(200, 24), 200, 200) == (1.0, 0.0, 0.0, 1.0)
    assert rect_outward_normal(Point(-10, -200), 200, 200) == (0.0, -1.0, 1.0, 0.0)


def _parent_with_two_children(expandable: bool) -> GraphData:
    return GraphData(
        nodes=[Node("R"), Node("P", expandable=expandable), Node("c1"), Node("c2")],
        edges=[Edge("R", "P"), Edge("P", "c1"), Edge("P", "c2")],
    )


def test_expandable_parent_fans_children_outward() -> None:
    g = _parent_with_two_children(expandable=True)
    pos = compute_radial_layout_advanced(
        g.nodes,
        g.edges,
        "R",
        2,
        RADII,
        80,
        level1_layout=RectRingsLayout(half_w=200, half_h=200),
        is_expandable=_expandable,
        node_box=NodeBox(pad=10),
    )

    parent = pos["P"]
    assert parent == pytest.approx((200.0, 24.0))
    for key in ("c1", "c2"):
        p = pos[key]
        # outward distance is at least 1.1 times the minimum separation
        assert math.dist(p, parent) == pytest.approx(110.0)
        assert p.x > parent.x
    assert pos["c1"].y - parent.y == pytest.approx(-(pos["c2"].y - parent.y))


def test_leaf_parent_combs_children_along_the_side() -> None:
    g = _parent_with_two_children(expandable=False)
    pos = compute_radial_layout_advanced(
        g.nodes,
        g.edges,
        "R",
        2,
        RADII,
        80,
        level1_layout=RectRingsLayout(half_w=200, half_h=200),
        is_expandable=_expandable,
        node_box=NodeBox(pad=10),
    )

    assert pos["c1"] == pytest.approx((310.0, -26.0))
    assert pos["c2"] == pytest.approx((310.0, 74.0))


def test_advanced_places_every_depth(star_graph: GraphData) -> None:
    pos = compute_radial_layout_advanced(
        star_graph.nodes,
        star_graph.edges,
        "hub",
        7,
        RADII,
        80,
        level1_layout=RectRingsLayout(half_w=300, half_h=200),
        is_expandable=_expandable,
    )

    assert "n00-c0" in pos
    assert "n25-c1" in pos


def test_adaptive_switches_on_level1_count(star_graph: GraphData) -> None:
    assert choose_layout_mode(star_graph.nodes, star_graph.edges, "hub", 20) == ("advanced", 30)
    assert choose_layout_mode(star_graph.nodes, star_graph.edges, "hub", 31) == ("simple", 30)

    simple = compute_radial_layout(star_graph.nodes, star_graph.edges, "hub", 7, RADII, 80)
    adaptive = compute_radial_layout_adaptive(
        star_graph.nodes, star_graph.edges, "hub", 7, RADII, 80, rect_rings_min_lvl1=31
    )
    assert adaptive == simple


def test_default_level_radii_follow_viewport() -> None:
    radii = default_level_radii(1000, 800)

    assert radii[1] == pytest.approx(224.0)
    assert radii[2] == pytest.approx(257.6)
    assert radii[4] == pytest.approx(100.8)
    assert set(radii) == set(range(1, 8))
    assert default_level_radii(1000, 800, {2: 42})[2] == 42.0


def test_child_radius_grows_with_count() -> None:
    assert compute_child_radius(100, 1, 90) == 100
    assert compute_child_radius(100, 10, 90) == pytest.approx(10 * 102 / (2 * math.pi))


def test_dynamic_layout_follows_edge_direction() -> None:
    nodes = [Node("R"), Node("A"), Node("B"), Node("C")]
    edges = [Edge("R", "A"), Edge("R", "B"), Edge("A", "C"), Edge("B", "C"), Edge("C", "R")]

    pos = compute_radial_layout_dynamic(nodes, edges, "R", 3, {1: 100.0, 2: 60.0})

    assert pos["R"] == Point(0.0, 0.0)
    assert math.dist(pos["A"], pos["R"]) == pytest.approx(100.0)
    assert math.dist(pos["B"], pos["R"]) == pytest.approx(100.0)
    # C is reachable from A and B; the first placement (under A) is kept
    assert math.dist(pos["C"], pos["A"]) == pytest.approx(60.0)
