"""Image frames and the pixel types they may hold."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np


class ProcessError(Exception):
    """Raised when a processing step cannot handle its input."""


class DataType(enum.Enum):
    """Pixel types an image may hold."""

    UNDEF = 0
    UINT8 = 1
    INT8 = 2
    UINT16 = 3
    INT16 = 4
    UINT32 = 5
    INT32 = 6
    UINT64 = 7
    INT64 = 8
    FLOAT = 9
    DOUBLE = 10

    def depth(self) -> int:
        """Bytes per pixel; 0 for an undefined type."""
        return _DTYPES[self].itemsize if self in _DTYPES else 0

    def is_signed(self) -> bool:
        """Whether the type can hold negative values."""
        return self not in _UNSIGNED

    @property
    def dtype(self) -> np.dtype:
        """The numpy dtype matching this pixel type."""
        try:
            return _DTYPES[self]
        except KeyError:
            raise ProcessError(f"Data type {self.name} has no pixel layout") from None


_DTYPES = {
    DataType.UINT8: np.dtype(np.uint8),
    DataType.INT8: np.dtype(np.int8),
    DataType.UINT16: np.dtype(np.uint16),
    DataType.INT16: np.dtype(np.int16),
    DataType.UINT32: np.dtype(np.uint32),
    DataType.INT32: np.dtype(np.int32),
    DataType.UINT64: np.dtype(np.uint64),
    DataType.INT64: np.dtype(np.int64),
    DataType.FLOAT: np.dtype(np.float32),
    DataType.DOUBLE: np.dtype(np.float64),
}

_BY_KIND = {(dt.kind, dt.itemsize): t for t, dt in _DTYPES.items()}

_UNSIGNED = frozenset({DataType.UINT8, DataType.UINT16, DataType.UINT32, DataType.UINT64})

_INTEGERS_WIDE = (
    DataType.UINT16,
    DataType.INT16,
    DataType.UINT32,
    DataType.INT32,
    DataType.UINT64,
    DataType.INT64,
    DataType.FLOAT,
    DataType.DOUBLE,
)

_ALLOWED_CASTS = {
    DataType.UINT8: frozenset(_INTEGERS_WIDE),
    DataType.INT8: frozenset(_INTEGERS_WIDE),
    DataType.UINT16: frozenset(_INTEGERS_WIDE[2:]),
    DataType.INT16: frozenset((DataType.UINT16,) + _INTEGERS_WIDE[2:]),
    DataType.UINT32: frozenset(_INTEGERS_WIDE[4:]),
    DataType.INT32: frozenset((DataType.UINT32,) + _INTEGERS_WIDE[4:]),
    DataType.UINT64: frozenset({DataType.FLOAT, DataType.DOUBLE}),
    DataType.INT64: frozenset({DataType.UINT64, DataType.FLOAT, DataType.DOUBLE}),
    DataType.FLOAT: frozenset({DataType.INT32, DataType.INT64, DataType.DOUBLE}),
    DataType.DOUBLE: frozenset({DataType.INT32, DataType.INT64, DataType.FLOAT}),
}


def _type_of(dtype: np.dtype) -> DataType:
    try:
        return _BY_KIND[(dtype.kind, dtype.itemsize)]
    except KeyError:
        raise ProcessError(f"Data type {dtype} not managed") from None


@dataclass(eq=False)
class Data:
    """One frame: a pixel array (rows, columns) with its metadata.

    ``dimensions`` follows the width-first convention: ``[width, height]``
    for a 2D image, i.e. the array shape reversed.
    """

    array: np.ndarray | None = None
    frame_number: int = -1
    timestamp: float = 0.0
    header: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.array is not None:
            array = np.asarray(self.array)
            _type_of(array.dtype)
            if not array.dtype.isnative:
                array = array.astype(array.dtype.newbyteorder("="))
            self.array = array

    @property
    def type(self) -> DataType:
        """The pixel type, UNDEF when there is no pixel array."""
        return DataType.UNDEF if self.array is None else _type_of(self.array.dtype)

    @property
    def dimensions(self) -> list[int]:
        """Sizes of each axis, fastest-varying first."""
        return [] if self.array is None else [int(n) for n in reversed(self.array.shape)]

    def depth(self) -> int:
        """Bytes per pixel."""
        return self.type.depth()

    def size(self) -> int:
        """Size of the pixel data in bytes."""
        total = self.depth()
        for n in self.dimensions:
            total *= n
        return total

    def is_signed(self) -> bool:
        """Whether the pixel type is signed."""
        return self.type.is_signed()

    def empty(self) -> bool:
        """True when the frame holds no pixel data."""
        return self.array is None

    def _with_array(self, array: np.ndarray | None) -> Data:
        return Data(
            array=array,
            frame_number=self.frame_number,
            timestamp=self.timestamp,
            header=dict(self.header),
        )

    def copy_header(self, data_type: DataType) -> Data:
        """A frame with the same metadata and shape, zero pixels of ``data_type``."""
        shape = () if self.array is None else self.array.shape
        return self._with_array(np.zeros(shape, dtype=data_type.dtype))

    def copy(self) -> Data:
        """A deep copy: metadata and an independent pixel array."""
        return self._with_array(None if self.array is None else self.array.copy())

    def cast(self, data_type: DataType) -> Data:
        """Convert pixels to ``data_type``; only widening-style casts are allowed."""
        current = self.type
        if data_type is current:
            return self
        if data_type not in _ALLOWED_CASTS.get(current, ()):
            raise ProcessError("This cast is not manage")
        with np.errstate(invalid="ignore", over="ignore"):
            converted = self.array.astype(data_type.dtype)
        return self._with_array(converted)

    def mask(self) -> Data:
        """An INT8 mask of this frame (low byte of each pixel).

        One-byte frames share their pixels; float or undefined frames give an
        empty frame.
        """
        current = self.type
        if current.depth() == 1:
            return self._with_array(self.array)
        if current not in _UNSIGNED and current not in (
            DataType.INT16,
            DataType.INT32,
            DataType.INT64,
        ):
            return Data()
        return self._with_array(self.array.astype(np.int8))

    def __str__(self) -> str:
        current = self.type
        name = current.name if current is not DataType.UNDEF else "UNKNOWN"
        dims = "".join(f"dimension_{i}={n}, " for i, n in enumerate(self.dimensions))
        buffer = "NULL" if self.array is None else f"<nbytes={self.array.nbytes}>"
        return (
            f"<type={current.value} ({name}), {dims}"
            f"frameNumber={self.frame_number}, timestamp={self.timestamp}, "
            f"header={self.header}, buffer={buffer}>"
        )