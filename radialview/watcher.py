"""
File system watcher for graph files.

Re-runs a callback when the watched graph file (or config file) changes:
- watchdog-based monitoring of the parent directory
- debounced so an editor's save cycle triggers one recompute
- atomic saves (write to temp + rename) count as a change
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class GraphFileHandler(FileSystemEventHandler):
    """
    Collects change events for a fixed set of files and flushes them after a quiet period.

    `flush_pending` must be called periodically by the owner (see `run_watch_loop`).
    """

    DEBOUNCE_SECONDS = 0.5

    def __init__(self, paths: list[Path], on_change: Callable[[Path], None]):
        super().__init__()
        self.paths = {str(p.resolve()) for p in paths}
        self.on_change = on_change

        # resolved path -> time of the last event
        self.pending: dict[str, float] = {}

    def _is_watched(self, path: str) -> bool:
        return str(Path(path).resolve()) in self.paths

    def _touch(self, path: str) -> None:
        self.pending[str(Path(path).resolve())] = time.time()

    def flush_pending(self, now: float | None = None) -> list[Path]:
        """Fire `on_change` for files that have been quiet for the debounce window."""
        now = time.time() if now is None else now
        ready = [p for p, ts in self.pending.items() if now - ts >= self.DEBOUNCE_SECONDS]

        fired: list[Path] = []
        for path_str in ready:
            del self.pending[path_str]
            path = Path(path_str)
            if not path.exists():
                logger.debug("skipping %s: file is gone", path)
                continue
            self.on_change(path)
            fired.append(path)
        return fired

    def on_created(self, event: FileCreatedEvent) -> None:
        if event.is_directory or not self._is_watched(event.src_path):
            return
        self._touch(event.src_path)

    def on_modified(self, event: FileModifiedEvent) -> None:
        if event.is_directory or not self._is_watched(event.src_path):
            return
        self._touch(event.src_path)

    def on_moved(self, event: FileMovedEvent) -> None:
        if event.is_directory:
            return
        if self._is_watched(event.dest_path):
            self._touch(event.dest_path)


def watch_graph(paths: list[Path], on_change: Callable[[Path], None]) -> tuple[Observer, GraphFileHandler]:
    """
    Start watching the directories holding `paths`.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = GraphFileHandler(paths, on_change)

    observer = Observer()
    for directory in sorted({str(p.resolve().parent) for p in paths}):
        observer.schedule(handler, directory, recursive=False)
    observer.start()

    return observer, handler


def run_watch_loop(paths: list[Path], on_change: Callable[[Path], None]) -> None:
    """
    Run the watch loop until interrupted.

    Blocks, flushing debounced changes every half second.
    """
    observer, handler = watch_graph(paths, on_change)

    try:
        while True:
            time.sleep(0.5)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
