"""Reduce a rectangular region of an image to a one-dimensional spectrum."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from imgproclib.data import Data, DataType, ProcessError
from imgproclib.task import SinkTask


class SpectrumMode(enum.Enum):
    """Direction of the summation."""

    LINES_SUM = 0
    """Add the lines together: one value per column."""
    COLUMN_SUM = 1
    """Add the columns together: one value per line."""


@dataclass
class Roi2SpectrumResult:
    """Spectrum computed for one frame."""

    frame_number: int = -1
    spectrum: Data = field(default_factory=Data)


_INTEGER_TYPES = frozenset({
    DataType.UINT8,
    DataType.INT8,
    DataType.UINT16,
    DataType.INT16,
    DataType.UINT32,
    DataType.INT32,
})
_FLOAT_TYPES = frozenset({DataType.FLOAT, DataType.DOUBLE})


class Roi2SpectrumTask(SinkTask[Roi2SpectrumResult]):
    """Record the spectrum of a region for every frame it is given."""

    def __init__(self, mode: SpectrumMode = SpectrumMode.LINES_SUM, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.mode = mode
        self.x = self.y = 0
        self.width = self.height = 0

    def set_roi(self, x: int, y: int, width: int, height: int) -> None:
        """Set the region's origin and size."""
        self.x, self.y = x, y
        self.width, self.height = width, height

    def process(self, data: Data) -> None:
        """Compute the spectrum of the region in ``data`` and record it."""
        result = Roi2SpectrumResult(frame_number=data.frame_number)
        dims = data.dimensions
        if len(dims) != 2:
            raise ProcessError("Roi2Spectrum : Only manage 2D data")
        width, height = dims
        if (
            self.x < 0
            or self.y < 0
            or width < self.x + self.width
            or height < self.y + self.height
        ):
            raise ProcessError("Roi2Spectrum : roi is not contained into data")

        if self.width > 0 and self.height > 0:
            if data.type in _INTEGER_TYPES:
                accumulate, output = np.int64, np.int32
            elif data.type in _FLOAT_TYPES:
                accumulate, output = np.float64, np.float64
            else:
                raise ProcessError("Roi2SpectrumTask : type not yet managed")

            region = data.array[self.y:self.y + self.height, self.x:self.x + self.width]
            axis = 0 if self.mode is SpectrumMode.LINES_SUM else 1
            summed = region.astype(accumulate).sum(axis=axis)
            result.spectrum = Data(array=summed.astype(output))

        self._set_result(result)