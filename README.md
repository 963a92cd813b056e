# imgproclib

Processing tasks for 2D detector frames, built on numpy.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Frames

`imgproclib.data.Data` holds one frame: a numpy pixel array (rows, columns)
together with `frame_number`, `timestamp` and a `header` dictionary. Its
`type` is a `DataType` (`UINT8` … `INT64`, `FLOAT`, `DOUBLE`, or `UNDEF`
when there is no array) and its `dimensions` are width-first, so a 3×4
array has `dimensions == [4, 3]`.

`Data` also offers `depth()`, `size()` (bytes), `is_signed()`, `empty()`,
`copy()`, `copy_header(data_type)` (same metadata, zeroed pixels),
`cast(data_type)` (only the widening-style conversions are allowed) and
`mask()` (an `INT8` frame of the low byte of each pixel).

Any input a task cannot handle — a frame that is not 2D, a pixel type a
task does not manage, a region outside the frame, a disallowed cast —
raises `imgproclib.data.ProcessError`.

## Frame transforms

These are `imgproclib.task.LinkTask` subclasses; `process(data)` returns a
frame. They are built with `processing_in_place=True` by default, in which
case the source frame itself is changed; pass `processing_in_place=False`
to get a new frame and leave the source alone.

- `imgproclib.flip.Flip(mode)`: mirror along X, Y or both (`FlipMode`).
- `imgproclib.rotation.Rotation(rotation)`: rotate clockwise by 90, 180 or
  270 degrees (`RotationType`); pixel types `UINT8`, `UINT16`, `UINT32`
  and `INT32`.
- `imgproclib.flatfield.FlatfieldCorrection`: set the flat field with
  `set_flatfield_image(image, normalize=True)` (normalising scales it to a
  mean of one); `process(data)` divides each pixel by the flat field,
  writing zero where the flat field is not above 1e-6. The frame is always
  corrected in place.

Flip and Rotation record the time they took in the frame's `header`.

## Measurements

These are `imgproclib.task.SinkTask` subclasses; `process(data)` records a
result instead of returning a frame. The last results are kept in
`history` (oldest first, `history_size` of them, 4 by default) and the
newest one in `last_result`.

- `imgproclib.peak_finder.PeakFinderTask(computing_mode)`: peak position
  by brightest pixel or by centre of signal of the projections
  (`ComputingMode.MAXIMUM` / `ComputingMode.CM`), as a `PeakFinderResult`.
- `imgproclib.roi2spectrum.Roi2SpectrumTask(mode)`: with
  `set_roi(x, y, width, height)`, sums the region line by line or column
  by column (`SpectrumMode`) into the `spectrum` of a `Roi2SpectrumResult`.
- `imgproclib.roi_counter.RoiCounterTask`: sum, average, standard
  deviation, minimum and maximum of a region, as a `RoiCounterResult`. The
  region is set with `set_roi`, `set_lut` (weights), `set_lut_mask` or
  `set_arc_mask` (an arc of a ring, angles in degrees, see `ArcRoi`) and
  read back with `roi()`, `lut()`, `lut_mask()` or `arc_mask()`;
  `roi_type` tells which kind (`RoiType`) is set. A frame assigned to
  `mask_image` restricts a rectangular region to its non-zero pixels.

## Example

```python
import numpy as np
from imgproclib.data import Data
from imgproclib.flip import Flip, FlipMode
from imgproclib.roi_counter import RoiCounterTask

frame = Data(np.arange(12, dtype=np.uint16).reshape(3, 4), frame_number=0)
flipped = Flip(FlipMode.X, processing_in_place=False).process(frame)

counter = RoiCounterTask()
counter.set_roi(0, 0, 2, 2)
counter.process(frame)
print(counter.last_result.sum)
```

## What it does not do

Tasks run one at a time on the frame they are given: there is no task
chaining or thread pool. There is no cropping task, no task that zeroes
or replaces masked pixels of a frame, and no beam-position (FWHM,
intensity) measurement.