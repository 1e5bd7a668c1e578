"""Single-slot deferred task, run on the host's next tick."""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


class DeferredTask:
    """
    Holds at most one pending callable.

    Scheduling a new task supersedes whatever was pending; the superseded one
    never runs. The key identifies what the task was scheduled for (an
    expansion path, for example).
    """

    def __init__(self) -> None:
        self._key: Hashable | None = None
        self._fn: Callable[[], Any] | None = None

    @property
    def pending(self) -> bool:
        return self._fn is not None

    @property
    def pending_key(self) -> Hashable | None:
        return self._key if self._fn is not None else None

    def schedule(self, key: Hashable, fn: Callable[[], Any]) -> None:
        if self._fn is not None:
            logger.debug("superseding deferred task %r with %r", self._key, key)
        self._key = key
        self._fn = fn

    def cancel(self) -> bool:
        had = self._fn is not None
        self._key = None
        self._fn = None
        return had

    def run_pending(self) -> bool:
        """Run the pending task, if any. Returns True if something ran."""
        fn = self._fn
        if fn is None:
            return False
        self._key = None
        self._fn = None
        fn()
        return True
