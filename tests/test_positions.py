from radialview.models import Point
from radialview.view.positions import PositionStore
from radialview.view.scheduler import DeferredTask


def test_drag_survives_non_structural_recompute() -> None:
    store = PositionStore()
    store.replace_all({"a": Point(0, 0), "b": Point(10, 0)})

    store.override("a", Point(5, 5))
    store.merged_with({"a": Point(1, 1), "b": Point(20, 0)})

    assert store.get("a") == Point(5, 5)
    assert store.get("b") == Point(20, 0)
    assert store.dragged_keys == frozenset({"a"})


def test_structural_recompute_clears_drags() -> None:
    store = PositionStore()
    store.replace_all({"a": Point(0, 0)})
    store.override("a", Point(5, 5))

    store.replace_all({"a": Point(1, 1)})

    assert store.get("a") == Point(1, 1)
    assert store.dragged_keys == frozenset()


def test_drag_of_node_that_left_the_layout_is_forgotten() -> None:
    store = PositionStore()
    store.replace_all({"a": Point(0, 0), "b": Point(1, 1)})
    store.override("b", Point(9, 9))

    store.merged_with({"a": Point(0, 0)})

    assert "b" not in store
    assert store.dragged_keys == frozenset()


def test_deferred_task_runs_once() -> None:
    calls: list[str] = []
    task = DeferredTask()

    task.schedule(("root",), lambda: calls.append("fit"))

    assert task.pending_key == ("root",)
    assert task.run_pending()
    assert not task.run_pending()
    assert calls == ["fit"]


def test_newer_task_supersedes_pending_one() -> None:
    calls: list[str] = []
    task = DeferredTask()

    task.schedule(("root", "a"), lambda: calls.append("first"))
    task.schedule(("root",), lambda: calls.append("second"))
    task.run_pending()

    assert calls == ["second"]


def test_cancel_drops_pending_task() -> None:
    calls: list[str] = []
    task = DeferredTask()
    task.schedule("k", lambda: calls.append("x"))

    assert task.cancel()
    assert task.pending_key is None
    assert not task.run_pending()
    assert calls == []
