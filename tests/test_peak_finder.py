import numpy as np
import pytest

from imgproclib.data import Data, ProcessError
from imgproclib.peak_finder import ComputingMode, PeakFinderResult, PeakFinderTask


def test_maximum_mode_finds_brightest_pixel():
    image = np.zeros((4, 5), dtype=np.uint16)
    image[1, 3] = 50
    task = PeakFinderTask()
    task.process(Data(image, frame_number=9))
    result = task.last_result
    assert result == PeakFinderResult(frame_number=9, x_peak=3.0, y_peak=1.0)


def test_maximum_mode_first_of_equal_maxima():
    image = np.zeros((3, 3), dtype=np.float32)
    image[2, 0] = 5.0
    image[0, 2] = 5.0
    task = PeakFinderTask()
    task.process(Data(image))
    assert (task.last_result.x_peak, task.last_result.y_peak) == (2.0, 0.0)


def test_maximum_mode_all_non_positive():
    task = PeakFinderTask()
    task.process(Data(np.full((3, 3), -4, dtype=np.int32)))
    assert (task.last_result.x_peak, task.last_result.y_peak) == (0.0, 0.0)


def test_maximum_mode_one_dimensional():
    line = np.array([1, 7, 2, 3], dtype=np.int8)
    task = PeakFinderTask()
    task.process(Data(line))
    assert (task.last_result.x_peak, task.last_result.y_peak) == (1.0, 0.0)


def test_centre_of_signal_symmetric_block():
    image = np.zeros((5, 5), dtype=np.int32)
    image[1:4, 1:4] = 10
    task = PeakFinderTask(ComputingMode.CM)
    task.process(Data(image))
    assert (task.last_result.x_peak, task.last_result.y_peak) == (2.0, 2.0)


def test_centre_of_signal_without_signal_raises():
    task = PeakFinderTask(ComputingMode.CM)
    with pytest.raises(ProcessError):
        task.process(Data(np.full((4, 4), 3, dtype=np.int32)))


def test_history_keeps_results_in_order():
    task = PeakFinderTask()
    for frame in range(3):
        task.process(Data(np.ones((2, 2), dtype=np.uint8), frame_number=frame))
    assert [r.frame_number for r in task.history] == [0, 1, 2]