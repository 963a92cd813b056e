"""Mirror an image horizontally, vertically or both."""

from __future__ import annotations

import enum
import time
from contextlib import contextmanager
from typing import Any, Iterator

from imgproclib.data import Data, ProcessError
from imgproclib.task import LinkTask


class FlipMode(enum.Enum):
    """Which axes to mirror."""

    NONE = 0
    X = 1
    Y = 2
    ALL = 3


_LABELS = {
    FlipMode.X: "Flip X",
    FlipMode.Y: "Flip Y",
    FlipMode.ALL: "Flip X&Y",
}


@contextmanager
def _timed(data: Data, info: str) -> Iterator[None]:
    start = time.perf_counter()
    yield
    data.header[info] = f"take : {time.perf_counter() - start}s"


def _flipped(array: Any, mode: FlipMode) -> Any:
    if mode is FlipMode.X:
        return array[:, ::-1]
    if mode is FlipMode.Y:
        return array[::-1, :]
    if mode is FlipMode.ALL:
        return array[::-1, ::-1]
    return array


class Flip(LinkTask):
    """Mirror 2D frames along the configured axes."""

    def __init__(self, mode: FlipMode = FlipMode.NONE, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.mode = mode

    def process(self, data: Data) -> Data:
        """Return the mirrored frame, or the source itself when working in place."""
        if len(data.dimensions) != 2:
            raise ProcessError("Flip : Only manage 2D data")

        mode = self.mode
        if self.processing_in_place:
            if mode in _LABELS:
                with _timed(data, _LABELS[mode]):
                    data.array[...] = _flipped(data.array, mode).copy()
            return data

        result = data.copy_header(data.type)
        if mode in _LABELS:
            with _timed(data, _LABELS[mode]):
                result.array[...] = _flipped(data.array, mode)
        else:
            result.array[...] = data.array
        return result