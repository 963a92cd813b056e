import numpy as np
import pytest

from imgproclib.data import Data, ProcessError
from imgproclib.flatfield import FlatfieldCorrection


def _frame(value=10, dtype=np.uint16, shape=(2, 3)):
    return Data(array=np.full(shape, value, dtype=dtype))


def test_unit_flatfield_leaves_frame_unchanged():
    task = FlatfieldCorrection()
    task.set_flatfield_image(Data(array=np.ones((2, 3), dtype=np.float32)), False)
    frame = Data(array=np.arange(6, dtype=np.uint16).reshape(2, 3))
    expected = frame.array.copy()
    result = task.process(frame)
    assert result is frame
    assert np.array_equal(result.array, expected)


def test_uniform_flatfield_normalizes_to_identity():
    task = FlatfieldCorrection()
    task.set_flatfield_image(_frame(2, np.uint8), True)
    assert task.flatfield_image.array.dtype == np.float32
    assert np.allclose(task.flatfield_image.array, 1.0)
    result = task.process(_frame(10))
    assert np.all(result.array == 10)


def test_unnormalized_flatfield_divides():
    task = FlatfieldCorrection()
    task.set_flatfield_image(_frame(2.0, np.float32), False)
    result = task.process(_frame(10, np.int32))
    assert np.all(result.array == 5)
    assert result.array.dtype == np.int32


def test_zero_flatfield_pixel_gives_zero():
    flat = np.ones((2, 3), dtype=np.float32)
    flat[1, 2] = 0.0
    task = FlatfieldCorrection()
    task.set_flatfield_image(Data(array=flat), False)
    result = task.process(_frame(10))
    assert result.array[1, 2] == 0
    assert np.all(result.array[flat > 0] == 10)


def test_already_normed_float_flatfield_is_kept():
    flat = Data(array=np.ones((2, 3), dtype=np.float32))
    task = FlatfieldCorrection()
    task.set_flatfield_image(flat, True)
    assert task.flatfield_image is flat


def test_zero_mean_flatfield_raises():
    task = FlatfieldCorrection()
    with pytest.raises(ProcessError, match="mean is 0"):
        task.set_flatfield_image(_frame(0, np.uint16), True)


def test_double_flatfield_cannot_be_normalized():
    task = FlatfieldCorrection()
    with pytest.raises(ProcessError, match="flatfield array type not managed"):
        task.set_flatfield_image(_frame(1.0, np.float64), True)


def test_shape_mismatch_raises():
    task = FlatfieldCorrection()
    task.set_flatfield_image(_frame(1.0, np.float32, (3, 3)), False)
    with pytest.raises(ProcessError, match="Source image differ from flatfield array"):
        task.process(_frame())


def test_unmanaged_frame_type_raises():
    task = FlatfieldCorrection()
    task.set_flatfield_image(_frame(1.0, np.float32), False)
    with pytest.raises(ProcessError, match="data type not yet managed"):
        task.process(_frame(10, np.int16))