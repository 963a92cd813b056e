import numpy as np
import pytest

from imgproclib.data import Data, DataType, ProcessError


TYPE_TABLE = [
    (DataType.UINT8, np.uint8, 1, False),
    (DataType.INT8, np.int8, 1, True),
    (DataType.UINT16, np.uint16, 2, False),
    (DataType.INT16, np.int16, 2, True),
    (DataType.UINT32, np.uint32, 4, False),
    (DataType.INT32, np.int32, 4, True),
    (DataType.UINT64, np.uint64, 8, False),
    (DataType.INT64, np.int64, 8, True),
    (DataType.FLOAT, np.float32, 4, True),
    (DataType.DOUBLE, np.float64, 8, True),
]


@pytest.mark.parametrize("data_type,dtype,depth,signed", TYPE_TABLE)
def test_depth_of_each_type(data_type, dtype, depth, signed):
    data = Data(np.zeros((2, 2), dtype=dtype))
    assert data.type is data_type
    assert data.depth() == depth
    assert data_type.depth() == depth


@pytest.mark.parametrize("data_type,dtype,depth,signed", TYPE_TABLE)
def test_signedness_of_each_type(data_type, dtype, depth, signed):
    data = Data(np.zeros((2, 2), dtype=dtype))
    assert data.is_signed() is signed
    assert data_type.is_signed() is signed


def test_undef_has_no_depth_and_no_dtype():
    assert DataType.UNDEF.depth() == 0
    with pytest.raises(ProcessError):
        DataType.UNDEF.dtype


def test_dimensions_are_width_first():
    data = Data(np.zeros((3, 5), dtype=np.uint16))
    assert data.dimensions == [5, 3]
    assert data.type is DataType.UINT16


def test_size_is_byte_count():
    array = np.zeros((4, 6), dtype=np.int32)
    data = Data(array)
    assert data.size() == array.nbytes
    assert data.depth() == array.itemsize


def test_empty_frame():
    data = Data()
    assert data.empty()
    assert data.type is DataType.UNDEF
    assert data.dimensions == []
    assert not Data(np.zeros((2, 2), dtype=np.uint8)).empty()


def test_unsupported_dtype_raises():
    with pytest.raises(ProcessError):
        Data(np.zeros((2, 2), dtype=np.complex128))


def test_copy_is_independent():
    original = Data(np.arange(6, dtype=np.uint8).reshape(2, 3), frame_number=7,
                    timestamp=1.5, header={"k": "v"})
    clone = original.copy()
    clone.array[0, 0] = 99
    clone.header["k"] = "other"
    assert original.array[0, 0] == 0
    assert original.header["k"] == "v"
    assert clone.frame_number == original.frame_number
    assert clone.timestamp == original.timestamp


def test_copy_header_keeps_shape_and_metadata():
    original = Data(np.arange(12, dtype=np.uint16).reshape(3, 4), frame_number=3,
                    timestamp=2.0, header={"a": "b"})
    fresh = original.copy_header(DataType.FLOAT)
    assert fresh.type is DataType.FLOAT
    assert fresh.dimensions == original.dimensions
    assert fresh.frame_number == original.frame_number
    assert fresh.header == original.header
    assert not fresh.array.any()


def test_cast_same_type_returns_same_object():
    data = Data(np.ones((2, 2), dtype=np.int32))
    assert data.cast(DataType.INT32) is data


def test_cast_widening_preserves_values():
    source = np.array([[0, 1, 255], [7, 8, 9]], dtype=np.uint8)
    cast = Data(source, frame_number=4).cast(DataType.DOUBLE)
    assert cast.type is DataType.DOUBLE
    assert cast.frame_number == 4
    np.testing.assert_array_equal(cast.array, source.astype(np.float64))


def test_cast_float_to_int_truncates_toward_zero():
    cast = Data(np.array([[2.7, -2.7]], dtype=np.float32)).cast(DataType.INT32)
    np.testing.assert_array_equal(cast.array, np.array([[2, -2]], dtype=np.int32))


@pytest.mark.parametrize(
    "source,target",
    [
        (DataType.UINT16, DataType.UINT8),
        (DataType.UINT32, DataType.INT32),
        (DataType.FLOAT, DataType.UINT16),
        (DataType.UINT64, DataType.INT64),
    ],
)
def test_disallowed_cast_raises(source, target):
    data = Data(np.zeros((2, 2), dtype=source.dtype))
    with pytest.raises(ProcessError, match="This cast is not manage"):
        data.cast(target)


def test_cast_of_empty_frame_raises():
    with pytest.raises(ProcessError):
        Data().cast(DataType.INT32)


def test_mask_of_wide_type_is_int8():
    source = np.array([[0, 1, 5], [0, 100, 3]], dtype=np.uint16)
    masked = Data(source).mask()
    assert masked.type is DataType.INT8
    assert masked.dimensions == [3, 2]
    np.testing.assert_array_equal(masked.array, source.astype(np.int8))


def test_mask_of_byte_type_shares_pixels():
    source = np.array([[1, 0], [0, 1]], dtype=np.uint8)
    masked = Data(source).mask()
    assert masked.type is DataType.UINT8
    assert masked.array is source


def test_mask_of_float_is_empty():
    assert Data(np.ones((2, 2), dtype=np.float32)).mask().empty()


def test_str_names_type():
    text = str(Data(np.zeros((2, 3), dtype=np.uint8)))
    assert "UINT8" in text
    assert "dimension_0=3" in text
    assert str(Data()).endswith("buffer=NULL>")