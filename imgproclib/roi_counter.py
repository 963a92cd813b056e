"""Statistics (sum, mean, deviation, extrema) over a region of an image."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from imgproclib.data import Data, DataType, ProcessError
from imgproclib.task import SinkTask


class RoiType(enum.Enum):
    """Shape of the region being counted."""

    UNDEF = 0
    SQUARE = 1
    ARC = 2
    LUT = 3
    MASK = 4


@dataclass
class ArcRoi:
    """An arc of a ring: centre, inner and outer radius, start and end angle in degrees."""

    x: float = 0.0
    y: float = 0.0
    r1: float = 0.0
    r2: float = 0.0
    a1: float = 0.0
    a2: float = 0.0


@dataclass
class RoiCounterResult:
    """Statistics of the region for one frame; positions are relative to the region."""

    frame_number: int = -1
    sum: float = 0.0
    average: float = 0.0
    std: float = 0.0
    min_value: float = 0.0
    max_value: float = 0.0
    min_x: int = 0
    min_y: int = 0
    max_x: int = 0
    max_y: int = 0


def _as_rows(array: np.ndarray) -> np.ndarray:
    return array.reshape(1, -1) if array.ndim == 1 else array


def _square_stats(image: np.ndarray, x: int, y: int, width: int, height: int,
                  result: RoiCounterResult) -> None:
    region = image[y:y + height, x:x + width]
    if region.size == 0:
        if 0 <= y < image.shape[0] and 0 <= x < image.shape[1]:
            result.min_value = result.max_value = float(image[y, x])
        result.average = result.std = math.nan
        return

    values = region.astype(np.float64)
    total = float(values.sum())
    result.sum = total
    result.average = total / region.size

    flat = region.ravel()
    max_index = int(np.argmax(flat))
    min_index = int(np.argmin(flat))
    result.max_value = float(flat[max_index])
    result.min_value = float(flat[min_index])
    result.max_y, result.max_x = divmod(max_index, width)
    result.min_y, result.min_x = divmod(min_index, width)

    result.std = math.sqrt(float(((values - result.average) ** 2).sum()) / region.size)


def _square_stats_with_mask(image: np.ndarray, mask: np.ndarray,
                            x: int, y: int, width: int, height: int,
                            result: RoiCounterResult) -> None:
    region = image[y:y + height, x:x + width]
    selected_mask = mask[y:y + height, x:x + width] != 0
    selected = region[selected_mask]
    used = int(selected.size)

    min_value = max_value = 0.0
    if used:
        rows, cols = np.nonzero(selected_mask)
        max_index = int(np.argmax(selected))
        min_index = int(np.argmin(selected))
        max_value = float(selected[max_index])
        min_value = float(selected[min_index])
        # The first selected pixel seeds the extrema without recording its position.
        if max_index:
            result.max_x, result.max_y = int(cols[max_index]), int(rows[max_index])
        if min_index:
            result.min_x, result.min_y = int(cols[min_index]), int(rows[min_index])

    total = float(selected.astype(np.float64).sum())
    result.sum = total
    result.average = total / used if used > 0 else 0.0

    # The deviation is accumulated over the pixels the mask leaves out.
    others = region[~selected_mask].astype(np.float64)
    if used > 0:
        result.std = math.sqrt(float(((others - result.average) ** 2).sum()) / used)
    else:
        result.std = 0.0

    result.min_value = min_value
    result.max_value = max_value


def _lut_stats(image: np.ndarray, x: int, y: int, lut: np.ndarray,
               result: RoiCounterResult) -> None:
    weights = _as_rows(lut)
    rows, cols = weights.shape
    region = image[y:y + rows, x:x + cols]
    used = weights != 0.0
    lut_weights = weights[used]
    values = region[used].astype(np.float64) * lut_weights

    if values.size:
        result.min_value = float(values.min())
        result.max_value = float(values.max())
        total = float(values.sum())
        weight = float(lut_weights.sum())
    else:
        result.min_value = result.max_value = 0.0
        total = weight = 0.0

    result.sum = total
    result.average = total / weight if weight > 0.0 else 0.0
    deviation = float(((values - result.average) ** 2).sum())
    result.std = math.sqrt(deviation / weight) if weight != 0.0 else 0.0


def _mask_stats(image: np.ndarray, x: int, y: int, mask: np.ndarray,
                result: RoiCounterResult) -> None:
    selection = _as_rows(mask) != 0
    rows, cols = selection.shape
    values = image[y:y + rows, x:x + cols][selection]
    count = int(values.size)

    if count == 0:
        result.min_value = result.max_value = 0.0
        result.sum = result.average = result.std = 0.0
        return

    result.min_value = float(values.min())
    result.max_value = float(values.max())

    # Sums accumulate in a 64-bit integer, truncating at every step.
    if values.dtype.kind in "iu":
        total = sum(values.tolist())
    else:
        total = math.trunc(values[0])
        for value in values[1:]:
            total = math.trunc(values.dtype.type(total) + value)
    result.sum = float(total)
    result.average = total / count

    deviation = 0
    for value in values.tolist():
        deviation = math.trunc(deviation + (value - result.average) ** 2)
    result.std = math.sqrt(deviation / count)


def _arc_lut(x0: int, y0: int, width: int, height: int,
             center_x: float, center_y: float, radius1: float, radius2: float,
             angle_start: float, angle_end: float) -> np.ndarray:
    xs = np.arange(x0, x0 + width, dtype=np.float64)[np.newaxis, :]
    ys = np.arange(y0, y0 + height, dtype=np.float64)[:, np.newaxis]
    dx = xs - center_x
    dy = ys - center_y
    r_sqr = dx ** 2 + dy ** 2
    in_ring = (r_sqr >= radius1 * radius1) & (r_sqr <= radius2 * radius2)

    vertical = ~(np.abs(dx - 1e-6) > 1e-6)
    with np.errstate(divide="ignore", invalid="ignore"):
        slope_angle = np.arctan(dy / dx) * 180 / math.pi
    angle = np.where(vertical, np.where(dy > 0, 90.0, -90.0), slope_angle)
    angle = np.where(dx < 0, np.where(dy > 0, angle + 180.0, angle - 180.0), angle)

    angle_diff = angle_end - angle_start
    offset = angle - angle_start
    if angle_diff > 0:
        offset = np.where(offset < 0, offset + 360.0, offset)
        inside = (offset >= 0) & (offset <= angle_diff)
    else:
        offset = np.where(offset > 0, offset - 360.0, offset)
        inside = (offset <= 0) & (offset >= angle_diff)
    return (in_ring & inside).astype(np.int8)


class RoiCounterTask(SinkTask[RoiCounterResult]):
    """Record statistics over a square, weighted, masked or arc region of each frame.

    ``mask_image``, when set to a frame of the data's size, restricts a square
    region to the pixels where it is non-zero.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.mask_image = Data()
        self._type = RoiType.UNDEF
        self._x = self._y = 0
        self._width = self._height = 0
        self._arc_roi = ArcRoi()
        self._lut = Data()

    @property
    def roi_type(self) -> RoiType:
        """The kind of region currently defined."""
        return self._type

    def set_roi(self, x: int, y: int, width: int, height: int) -> None:
        """Define a rectangular region."""
        self._type = RoiType.SQUARE
        self._x, self._y = x, y
        self._width, self._height = width, height

    def roi(self) -> tuple[int, int, int, int]:
        """The rectangular region as (x, y, width, height)."""
        if self._type is not RoiType.SQUARE:
            raise ProcessError("RoiCounterTask: This is not a SQUARE Roi")
        return self._x, self._y, self._width, self._height

    def set_lut(self, x: int, y: int, lut: Data) -> None:
        """Define a region weighted by ``lut``, placed with its origin at (x, y)."""
        if not 1 <= len(lut.dimensions) <= 2:
            raise ProcessError("RoiCounterTask : Only manage 1 or 2D data")
        self._type = RoiType.LUT
        self._lut = lut.cast(DataType.DOUBLE)
        self._x, self._y = x, y

    def lut(self) -> tuple[int, int, Data]:
        """The weighted region as (x, y, lut)."""
        if self._type is not RoiType.LUT:
            raise ProcessError("RoiCounterTask: This is not a LUT Roi")
        return self._x, self._y, self._lut

    def set_lut_mask(self, x: int, y: int, mask: Data) -> None:
        """Define a region of the pixels where ``mask`` is non-zero, origin at (x, y)."""
        self._type = RoiType.MASK
        self._lut = mask.mask()
        self._x, self._y = x, y

    def lut_mask(self) -> tuple[int, int, Data]:
        """The masked region as (x, y, mask)."""
        if self._type is not RoiType.MASK:
            raise ProcessError("RoiCounterTask: This is not a MASK Roi")
        return self._x, self._y, self._lut

    def set_arc_mask(self, center_x: float, center_y: float, radius1: float,
                     radius2: float, angle_start: float, angle_end: float) -> None:
        """Define an arc of a ring; angles are in degrees."""
        if radius1 > radius2:
            radius1, radius2 = radius2, radius1
        self._type = RoiType.ARC
        self._arc_roi = ArcRoi(center_x, center_y, radius1, radius2, angle_start, angle_end)

        corners = [
            (center_x + r * math.cos(a * math.pi / 180.0),
             center_y + r * math.sin(a * math.pi / 180.0))
            for r, a in ((radius1, angle_start), (radius2, angle_start),
                         (radius1, angle_end), (radius2, angle_end))
        ]
        a_start, a_end = sorted((angle_start, angle_end))
        angle = int((a_start + 90) / 90) * 90
        while angle < a_end:
            corners.append((center_x + radius2 * math.cos(angle * math.pi / 180.0),
                            center_y + radius2 * math.sin(angle * math.pi / 180.0)))
            angle += 90

        x_min = min(px for px, _ in corners)
        x_max = max(px for px, _ in corners)
        y_min = min(py for _, py in corners)
        y_max = max(py for _, py in corners)

        self._x = math.floor(x_min)
        self._y = math.floor(y_min)
        if self._x < 0 or self._y < 0:
            self._type = RoiType.UNDEF
            raise ProcessError(
                f"RoiCounterTask arc calculation give an origin ({self._x},{self._y}) "
                "which is below index 0"
            )
        self._width = math.ceil(x_max) - self._x + 1
        self._height = math.ceil(y_max) - self._y + 1

        self._lut = Data(array=_arc_lut(self._x, self._y, self._width, self._height,
                                        center_x, center_y, radius1, radius2,
                                        angle_start, angle_end))

    def arc_mask(self) -> tuple[float, float, float, float, float, float]:
        """The arc as (center_x, center_y, radius1, radius2, angle_start, angle_end)."""
        if self._type is not RoiType.ARC:
            raise ProcessError("RoiCounterTask: This is not a ARC Roi")
        arc = self._arc_roi
        return arc.x, arc.y, arc.r1, arc.r2, arc.a1, arc.a2

    def _check_roi_with_data_size(self, data: Data) -> None:
        if self._x < 0 or self._y < 0:
            raise ProcessError("RoiCounter : roi origin must be positive")
        dims = data.dimensions
        width, height = dims[0], dims[1]

        if self._type is RoiType.SQUARE:
            if width < self._x + self._width or height < self._y + self._height:
                raise ProcessError(
                    f"RoiCounter : roi <{self._x},{self._y}>-<{self._width}x{self._height}>"
                    f" is not contained into data <{width}x{height}>"
                )
            return
        if self._type is RoiType.LUT:
            what = "lut"
        elif self._type in (RoiType.ARC, RoiType.MASK):
            what = "mask"
        else:
            raise ProcessError("RoiCounter : roi is not defined")

        lut_dims = self._lut.dimensions
        if len(lut_dims) != len(dims):
            raise ProcessError(f"RoiLutCounter {what} and data must have the same dimension")
        if lut_dims[0] + self._x > dims[0]:
            raise ProcessError(
                f"RoiLutCounter {what} width + origin go outside of the data bounding box"
            )
        if len(lut_dims) > 1 and lut_dims[1] + self._y > dims[1]:
            raise ProcessError(
                f"RoiLutCounter {what} height + origin got outside of the data bounding box"
            )

    def process(self, data: Data) -> None:
        """Compute the region's statistics in ``data`` and record them."""
        if len(data.dimensions) != 2:
            raise ProcessError("RoiCounterTask : Only manage 2D data")
        self._check_roi_with_data_size(data)

        result = RoiCounterResult(frame_number=data.frame_number)
        image = data.array
        if self.mask_image.empty():
            if self._type is RoiType.SQUARE:
                _square_stats(image, self._x, self._y, self._width, self._height, result)
            elif self._type is RoiType.LUT:
                _lut_stats(image, self._x, self._y, self._lut.array, result)
            else:
                _mask_stats(image, self._x, self._y, self._lut.array, result)
        elif self.mask_image.dimensions == data.dimensions:
            _square_stats_with_mask(image, self.mask_image.array, self._x, self._y,
                                    self._width, self._height, result)
        else:
            raise ProcessError("RoiCounter : Source image size differ from mask")

        self._set_result(result)