"""Divide frames by a flat-field image."""

from __future__ import annotations

from typing import Any

import numpy as np

from imgproclib.data import Data, DataType, ProcessError
from imgproclib.task import LinkTask

_NORMALIZABLE = frozenset({
    DataType.UINT8,
    DataType.INT8,
    DataType.UINT16,
    DataType.INT16,
    DataType.UINT32,
    DataType.INT32,
    DataType.UINT64,
    DataType.INT64,
    DataType.FLOAT,
})

_CORRECTABLE = frozenset({DataType.UINT8, DataType.UINT16, DataType.UINT32, DataType.INT32})


def _normalize(image: Data) -> Data:
    """Scale the flat field so its mean is one, as FLOAT pixels."""
    if image.type not in _NORMALIZABLE:
        raise ProcessError("FlatfieldCorrection : flatfield array type not managed")
    values = image.array
    mean = float(values.sum(dtype=np.float64)) / values.size
    if image.type is DataType.FLOAT and abs(mean - 1.0) < 1e-6:
        return image
    if mean > 0.0:
        normed = image.copy_header(DataType.FLOAT)
        normed.array[...] = (values.astype(np.float32).astype(np.float64) / mean).astype(
            np.float32
        )
        return normed
    raise ProcessError("FlatfieldCorrection : Flatfield data mean is 0. !!!")


class FlatfieldCorrection(LinkTask):
    """Divide each pixel by the matching flat-field pixel; the frame is changed in place."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._flatfield = Data()

    @property
    def flatfield_image(self) -> Data:
        """The flat field currently in use."""
        return self._flatfield

    def set_flatfield_image(self, image: Data, normalize: bool = True) -> None:
        """Use ``image`` as the flat field, normalising it to a mean of one if asked."""
        if image.empty():
            self._flatfield = Data()
        elif normalize:
            self._flatfield = _normalize(image)
        else:
            self._flatfield = image.copy()

    def process(self, data: Data) -> Data:
        """Correct ``data`` by the flat field and return it."""
        if data.dimensions != self._flatfield.dimensions:
            raise ProcessError(
                "FlatfieldCorrection : Source image differ from flatfield array"
            )
        if data.type not in _CORRECTABLE:
            raise ProcessError("FlatfieldCorrection : data type not yet managed")

        flatfield = self._flatfield.array.astype(np.float32)
        src = data.array
        usable = flatfield.astype(np.float64) > 1e-6
        quotient = np.zeros(src.shape, dtype=np.float32)
        np.divide(src.astype(np.float32), flatfield, out=quotient, where=usable)
        with np.errstate(invalid="ignore", over="ignore"):
            data.array[...] = quotient.astype(src.dtype)
        return data