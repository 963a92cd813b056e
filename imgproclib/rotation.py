"""Rotate an image by a quarter, half or three quarters of a turn."""

from __future__ import annotations

import enum
import time
from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np

from imgproclib.data import Data, DataType, ProcessError
from imgproclib.task import LinkTask


class RotationType(enum.Enum):
    """Clockwise rotation angle."""

    R_90 = 90
    R_180 = 180
    R_270 = 270


_MANAGED = frozenset({DataType.UINT8, DataType.UINT16, DataType.UINT32, DataType.INT32})

# np.rot90 turns counter-clockwise for positive k.
_TURNS = {RotationType.R_90: -1, RotationType.R_180: 2, RotationType.R_270: 1}


@contextmanager
def _timed(data: Data, info: str) -> Iterator[None]:
    start = time.perf_counter()
    yield
    data.header[info] = f"take : {time.perf_counter() - start}s"


class Rotation(LinkTask):
    """Rotate 2D frames clockwise by the configured angle."""

    def __init__(self, rotation: RotationType = RotationType.R_90, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.rotation = rotation

    def process(self, data: Data) -> Data:
        """Return the rotated frame; in place, the source is updated too."""
        if len(data.dimensions) != 2:
            raise ProcessError("Rotation : Only manage 2D data")

        rotation = self.rotation if self.rotation in _TURNS else RotationType.R_90
        with _timed(data, f"Rotation {rotation.value} deg"):
            if data.type not in _MANAGED:
                raise ProcessError("Rotation : type not managed yet")
            result = data._with_array(
                np.ascontiguousarray(np.rot90(data.array, k=_TURNS[rotation]))
            )

        if self.processing_in_place:
            data.array = result.array.copy()
        return result