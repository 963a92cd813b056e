"""Base classes for processing steps."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Generic, TypeVar

from imgproclib.data import Data

R = TypeVar("R")


class LinkTask:
    """A step that turns one frame into another.

    With ``processing_in_place`` set, the step may write its result into the
    source frame instead of allocating a new one.
    """

    def __init__(self, *, processing_in_place: bool = True,
                 event_callback: Any | None = None) -> None:
        self.processing_in_place = processing_in_place
        self.event_callback = event_callback

    def process(self, data: Data) -> Data:
        """Return the processed frame; the base step passes it through."""
        return data


class SinkTask(Generic[R]):
    """A step that consumes frames and records a result for each one."""

    def __init__(self, *, history_size: int = 4) -> None:
        if history_size < 1:
            raise ValueError("history_size must be at least 1")
        self._history: deque[R] = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def process(self, data: Data) -> None:
        """Consume a frame; the base step records nothing."""
        return None

    @property
    def history(self) -> list[R]:
        """Recorded results, oldest first."""
        with self._lock:
            return list(self._history)

    @property
    def last_result(self) -> R | None:
        """The most recent result, or None when none was recorded."""
        with self._lock:
            return self._history[-1] if self._history else None

    def _set_result(self, result: R) -> None:
        with self._lock:
            self._history.append(result)