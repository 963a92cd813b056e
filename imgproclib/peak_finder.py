"""Locate the peak of an image, by its brightest pixel or its centre of signal."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import numpy as np

from imgproclib.data import Data, DataType, ProcessError
from imgproclib.task import SinkTask


class ComputingMode(enum.Enum):
    """How the peak position is computed."""

    MAXIMUM = 0
    CM = 1


@dataclass
class PeakFinderResult:
    """Peak position found in one frame."""

    frame_number: int = -1
    x_peak: float = 0.0
    y_peak: float = 0.0


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return -q if a < 0 else q


def _centre(projection: np.ndarray) -> float:
    """Mean index of channels above the projection's average level."""
    dtype = projection.dtype
    count = len(projection)
    with np.errstate(over="ignore"):
        total = projection.sum(dtype=dtype)
    if dtype.kind == "f":
        background = dtype.type(total / count)
    else:
        background = dtype.type(_trunc_div(int(total), count))
    with np.errstate(over="ignore"):
        above = projection - background
    positions = np.flatnonzero(above > 0)
    if positions.size == 0:
        raise ProcessError("PeakFinder : no signal above background")
    return float(int(positions.sum()) // positions.size)


def _compute_peaks(data: Data, mode: ComputingMode, result: PeakFinderResult) -> None:
    dims = data.dimensions
    width = dims[0]
    if width == 0:
        raise ProcessError("PeakFinder : empty frame")
    y_dim = dims[1] if len(dims) >= 2 else 0
    if len(dims) != 2 and y_dim == 0:
        y_dim = 1
    image = data.array.reshape(-1, width)[:y_dim]

    if mode is ComputingMode.MAXIMUM:
        flat = image.ravel()
        index = int(np.argmax(flat))
        if flat[index] > flat.dtype.type(0):
            y_max, x_max = divmod(index, width)
        else:
            x_max = y_max = 0
        result.x_peak = float(x_max)
        result.y_peak = float(y_max)
    else:
        dtype = image.dtype
        with np.errstate(over="ignore"):
            x_projection = image.sum(axis=0, dtype=dtype)
            y_projection = image.sum(axis=1, dtype=dtype)
        result.x_peak = _centre(x_projection)
        result.y_peak = _centre(y_projection)


class PeakFinderTask(SinkTask[PeakFinderResult]):
    """Record the peak position of every frame it is given."""

    def __init__(self, computing_mode: ComputingMode = ComputingMode.MAXIMUM,
                 **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.computing_mode = computing_mode
        self.nb_peaks = 1

    def process(self, data: Data) -> None:
        """Find the peak of ``data`` and record it."""
        result = PeakFinderResult(frame_number=data.frame_number)
        if data.type is not DataType.UNDEF:
            _compute_peaks(data, self.computing_mode, result)
        self._set_result(result)