import numpy as np
import pytest

from sigscope.core import smoothing


def test_centred_moving_average_shrinks_at_edges():
    out = smoothing.moving_average([1, 2, 3, 4, 5], 3)
    np.testing.assert_allclose(out, [1.5, 2, 3, 4, 4.5])


def test_moving_average_rejects_bad_input():
    with pytest.raises(ValueError):
        smoothing.moving_average([1, 2], 0)
    with pytest.raises(ValueError):
        smoothing.moving_average([], 3)


@pytest.mark.parametrize("size", [2, 3])
def test_median_filter_removes_spike(size):
    out = smoothing.median_filter([1, 1, 10, 1, 1], size)
    np.testing.assert_allclose(out, [1, 1, 1, 1, 1])


def test_gaussian_kernel():
    kernel = smoothing.gaussian_kernel(1.0)
    assert kernel.size == 7
    assert kernel.sum() == pytest.approx(1.0)
    np.testing.assert_allclose(kernel, kernel[::-1])
    with pytest.raises(ValueError):
        smoothing.gaussian_kernel(0.0)


def test_gaussian_filter_keeps_constant_signal():
    out = smoothing.gaussian_filter(np.full(20, 3.0), sigma=2.0)
    np.testing.assert_allclose(out, 3.0)


def test_savitzky_golay_tabulated_coefficients():
    impulse = np.zeros(11)
    impulse[5] = 1.0
    out = smoothing.savitzky_golay(impulse, 5, 2)
    np.testing.assert_allclose(out[3:8], np.array([-3, 12, 17, 12, -3]) / 35, atol=1e-12)


@pytest.mark.parametrize("window, order", [(5, 2), (7, 3), (11, 4), (6, 2)])
def test_savitzky_golay_preserves_polynomials(window, order):
    x = np.arange(40, dtype=float)
    data = 0.01 * x ** order - 0.5 * x + 2.0
    out = smoothing.savitzky_golay(data, window, order)
    half = (window | 1) // 2
    np.testing.assert_allclose(out[half:-half], data[half:-half], rtol=1e-8, atol=1e-8)


def test_savitzky_golay_rejects_high_order():
    with pytest.raises(ValueError):
        smoothing.savitzky_golay(np.ones(10), 5, 5)
