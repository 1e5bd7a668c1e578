from pathlib import Path

from watchdog.events import FileModifiedEvent, FileMovedEvent

from radialview.commands.watch_cmd import render_once
from radialview.watcher import GraphFileHandler


def test_handler_debounces_and_fires_once(graph_file: Path) -> None:
    fired: list[Path] = []
    handler = GraphFileHandler([graph_file], fired.append)

    handler.on_modified(FileModifiedEvent(str(graph_file)))
    handler.on_modified(FileModifiedEvent(str(graph_file)))
    stamp = handler.pending[str(graph_file.resolve())]

    assert handler.flush_pending(now=stamp) == []
    assert handler.flush_pending(now=stamp + 1.0) == [graph_file.resolve()]
    assert fired == [graph_file.resolve()]
    assert handler.pending == {}


def test_handler_ignores_other_files(graph_file: Path, tmp_path: Path) -> None:
    handler = GraphFileHandler([graph_file], lambda p: None)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.json")))

    assert handler.pending == {}


def test_atomic_save_counts_as_change(graph_file: Path, tmp_path: Path) -> None:
    handler = GraphFileHandler([graph_file], lambda p: None)

    handler.on_moved(FileMovedEvent(str(tmp_path / ".graph.json.tmp"), str(graph_file)))

    assert str(graph_file.resolve()) in handler.pending


def test_render_once_json(graph_file: Path) -> None:
    text = render_once(graph_file, drill=("A",))

    assert '"focus": "A"' in text
