from radialview.models import Edge, GraphData, Node
from radialview.view.expansion import CollapsedInfo, ExpansionState


def test_initial_state(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")

    assert state.path == ("CENTER",)
    assert state.focus == "CENTER"
    assert state.depth == 1
    assert state.visible_node_keys() == {"CENTER", "A", "B"}
    assert state.collapsed_info() == {}


def test_drill_down_hides_siblings(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")

    assert state.drill_down("A")

    assert state.path == ("CENTER", "A")
    assert state.visible_node_keys() == {"CENTER", "A", "C"}
    assert state.collapsed_info() == {"CENTER": CollapsedInfo(total_children=2, hidden_children=1)}
    assert [n.key for n in state.visible_nodes()] == ["CENTER", "A", "C"]


def test_drill_down_rejections(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")

    assert not state.drill_down("CENTER")  # root
    assert not state.drill_down("C")  # not connected to the focus
    assert not state.drill_down("missing")
    assert state.drill_down("A")
    assert not state.drill_down("A")  # already in the path
    assert state.path == ("CENTER", "A")


def test_connectivity_uses_full_edge_set() -> None:
    graph = GraphData(
        nodes=[Node("R"), Node("A"), Node("B")],
        edges=[Edge("R", "A"), Edge("B", "A")],
    )
    state = ExpansionState(graph, "R")

    assert state.drill_down("A")
    # incoming edge direction still counts
    assert state.drill_down("B")
    assert state.path == ("R", "A", "B")


def test_expansion_round_trip(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")
    nodes_before = state.visible_node_keys()
    edges_before = state.visible_edges()

    state.drill_down("A")
    assert state.drill_up("CENTER")

    assert state.path == ("CENTER",)
    assert state.visible_node_keys() == nodes_before
    assert state.visible_edges() == edges_before


def test_drill_up_on_focus_is_a_no_op(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")
    state.drill_down("A")

    assert not state.drill_up("A")
    assert not state.drill_up("B")
    assert state.path == ("CENTER", "A")


def test_activate_toggles_between_down_and_up(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")

    assert state.activate("A")
    assert state.path == ("CENTER", "A")
    assert state.activate("CENTER")
    assert state.path == ("CENTER",)


def test_visibility_invariant(star_graph: GraphData) -> None:
    state = ExpansionState(star_graph, "hub")
    state.drill_down("n05")

    keys = state.visible_node_keys()
    assert all(k in keys for k in state.path)
    for e in state.visible_edges():
        assert e.source in keys and e.target in keys


def test_reset_returns_to_root(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")
    state.drill_down("A")

    state.reset()
    assert state.path == ("CENTER",)

    state.reset(root_key="A")
    assert state.path == ("A",)
    assert state.visible_node_keys() == {"A", "CENTER", "C"}


def test_prune_drops_disconnected_entries(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")
    state.drill_down("A")
    state.drill_down("C")

    state.graph = GraphData(
        nodes=small_graph.nodes,
        edges=[Edge("CENTER", "B"), Edge("A", "C")],
    )
    removed = state.prune()

    assert removed == ["A", "C"]
    assert state.path == ("CENTER",)


def test_prune_keeps_valid_path(small_graph: GraphData) -> None:
    state = ExpansionState(small_graph, "CENTER")
    state.drill_down("A")

    assert state.prune() == []
    assert state.path == ("CENTER", "A")
