import logging

import numpy as np
import pytest

from sigscope.config import Settings
from sigscope.types import ChirpConfig, FilterConfig, NoiseConfig, SignalConfig, Window
from sigscope.utils.io import load_array
from sigscope.utils.logging import get_logger
from sigscope.utils.windows import iter_windows, window_slices


def test_types():
    cfg = SignalConfig(sample_rate=100, duration=0.5)
    assert cfg.num_samples == 50
    assert SignalConfig(sample_rate=5, duration=0.5).num_samples == 2
    assert SignalConfig(sample_rate=7, duration=0.5).num_samples == 4
    np.testing.assert_allclose(cfg.time_axis()[:3], [0.0, 0.01, 0.02])
    with pytest.raises(ValueError):
        SignalConfig(sample_rate=0, duration=1)
    with pytest.raises(ValueError):
        SignalConfig(sample_rate=10, duration=-1)
    with pytest.raises(ValueError):
        ChirpConfig(sample_rate=10, duration=1, start_frequency=0, end_frequency=5, method="logarithmic")
    with pytest.raises(ValueError):
        ChirpConfig(sample_rate=10, duration=1, method="quadratic")
    with pytest.raises(ValueError):
        NoiseConfig("blue")
    assert FilterConfig("bandpass", 1, 10, cutoff_frequency2=2).is_band
    assert not FilterConfig("lowpass", 1, 10).is_band
    assert Window(2, 5).width == 3


def test_windows():
    ws = list(iter_windows(5, 3, 2))
    assert ws == [Window(0, 3), Window(2, 5)]
    slices = window_slices([1, 2, 3, 4, 5], 3, 2)
    assert [s.tolist() for s in slices] == [[1, 2, 3], [3, 4, 5]]
    with pytest.raises(ValueError):
        list(iter_windows(2, 3))
    with pytest.raises(ValueError):
        list(iter_windows(5, 3, 0))


def test_padded_windows():
    assert list(iter_windows(6, 3, 2, pad=True)) == [Window(0, 3), Window(2, 5), Window(4, 7)]
    assert list(iter_windows(2, 4, pad=True)) == [Window(0, 4)]
    slices = window_slices([1, 2, 3, 4, 5, 6], 3, 2, pad=True)
    assert slices[-1].tolist() == [5, 6, 0]


def test_logging():
    logger = get_logger("sigscope.test")
    logger2 = get_logger("sigscope.test")
    assert logger is logger2
    assert len(logger.handlers) == 1
    logger.debug("debug message")


def test_logging_level_from_settings():
    settings = Settings()
    settings.logging.level = "debug"
    logger = get_logger("sigscope.test.level", settings=settings)
    assert logger.level == logging.DEBUG
    assert get_logger("sigscope.test.level", level="WARNING").level == logging.WARNING


def test_load_array(tmp_path):
    csv = tmp_path / "x.csv"
    csv.write_text("1.5,2,3\n")
    np.testing.assert_allclose(load_array(csv), [1.5, 2.0, 3.0])
    col = tmp_path / "y.txt"
    col.write_text("4\n5\n")
    np.testing.assert_allclose(load_array(col), [4.0, 5.0])
    npy = tmp_path / "z.npy"
    np.save(npy, np.array([[1.0, 2.0], [3.0, 4.0]]))
    np.testing.assert_allclose(load_array(npy), [1.0, 2.0, 3.0, 4.0])
