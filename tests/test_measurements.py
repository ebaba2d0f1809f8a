import math

import numpy as np
import pytest

from sigscope.core import measurements


def test_levels():
    data = [1.0, 2.0, 3.0, 4.0]
    expected = math.sqrt((1 ** 2 + 2 ** 2 + 3 ** 2 + 4 ** 2) / 4)
    assert measurements.rms(data) == pytest.approx(expected)
    assert measurements.peak([-3.0, 2.0]) == 3.0
    assert measurements.peak_to_peak([-3.0, 2.0]) == 5.0
    with pytest.raises(ValueError):
        measurements.rms([])


def test_snr():
    clean = np.array([1.0, -1.0, 1.0, -1.0])
    assert measurements.snr(clean + 0.1, clean) == pytest.approx(20.0)
    assert measurements.snr(clean, clean) == math.inf
    assert measurements.snr(np.full(4, 0.1), np.zeros(4)) == -math.inf
    with pytest.raises(ValueError):
        measurements.snr([1.0, 2.0], [1.0])


def test_find_signal_peaks():
    assert measurements.find_signal_peaks([0, 1, 0, 3, 0, 0.05, 0]) == [1, 3]
    assert measurements.find_signal_peaks([0, 1, 0, 3, 0, 2, 0, 0], min_distance=2) == [3]
    assert measurements.find_signal_peaks([0, -2, 0]) == [1]
    with pytest.raises(ValueError):
        measurements.find_signal_peaks([0, 1, 0], min_distance=0)
