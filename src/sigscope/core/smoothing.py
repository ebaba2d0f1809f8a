"""Stateless smoothing filters.

Each routine returns an array of the same length as its input.  Windows are
centred on the output sample; how the edges are handled differs per filter
and is stated in the individual docstrings.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from scipy.signal import savgol_coeffs

logger = logging.getLogger(__name__)


def _as_series(data: Sequence[float]) -> np.ndarray:
    arr = np.asarray(data, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("data must not be empty")
    return arr


def _validate_window(W: int) -> None:
    if W < 1:
        raise ValueError("window size must be positive")


def _odd(W: int) -> int:
    if W % 2 == 0:
        logger.debug("window size %d is even, using %d", W, W + 1)
        return W + 1
    return W


def moving_average(data: Sequence[float], window_size: int) -> np.ndarray:
    """Centred moving average.

    Sample ``i`` averages ``data[i - W//2 : i + ceil(W/2)]``; near the edges
    the window shrinks to the samples that exist.
    """

    arr = _as_series(data)
    _validate_window(window_size)
    n = arr.size
    before = window_size // 2
    after = math.ceil(window_size / 2)
    csum = np.concatenate(([0.0], np.cumsum(arr)))
    idx = np.arange(n)
    start = np.maximum(0, idx - before)
    end = np.minimum(n, idx + after)
    return (csum[end] - csum[start]) / (end - start)


def median_filter(data: Sequence[float], window_size: int) -> np.ndarray:
    """Centred running median over an odd window.

    Even ``window_size`` values are bumped to the next odd size.  Edge
    windows shrink; for an even number of surviving samples the upper
    middle value is taken.
    """

    arr = _as_series(data)
    _validate_window(window_size)
    half = _odd(window_size) // 2
    n = arr.size
    out = np.empty(n, dtype=float)
    for i in range(n):
        window = np.sort(arr[max(0, i - half) : min(n, i + half + 1)])
        out[i] = window[window.size // 2]
    return out


def gaussian_kernel(sigma: float, kernel_size: int | None = None) -> np.ndarray:
    """Normalised Gaussian kernel of odd length (default ``ceil(6*sigma)``)."""

    if sigma <= 0:
        raise ValueError("sigma must be positive")
    if kernel_size is None:
        kernel_size = max(1, math.ceil(6 * sigma))
    _validate_window(kernel_size)
    kernel_size = _odd(kernel_size)
    x = np.arange(kernel_size, dtype=float) - kernel_size // 2
    kernel = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def _clamped_convolve(arr: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    half = kernel.size // 2
    padded = np.pad(arr, half, mode="edge")
    return np.convolve(padded, kernel[::-1], mode="valid")


def gaussian_filter(data: Sequence[float], sigma: float = 1.0, kernel_size: int | None = None) -> np.ndarray:
    """Convolve ``data`` with :func:`gaussian_kernel`, repeating edge samples."""

    arr = _as_series(data)
    return _clamped_convolve(arr, gaussian_kernel(sigma, kernel_size))


def savitzky_golay(data: Sequence[float], window_size: int = 5, poly_order: int = 2) -> np.ndarray:
    """Savitzky-Golay smoothing.

    The coefficients come from a least-squares polynomial fit of order
    ``poly_order`` over ``window_size`` points, so any odd window larger than
    the order is supported.  An even ``window_size`` is bumped to the next
    odd size.  Samples beyond either end repeat the edge value.

    Raises
    ------
    ValueError
        If ``poly_order`` is negative or not smaller than the window.
    """

    arr = _as_series(data)
    _validate_window(window_size)
    window_size = _odd(window_size)
    if poly_order < 0:
        raise ValueError("poly_order must not be negative")
    if poly_order >= window_size:
        raise ValueError("poly_order must be less than window_size")
    coeffs = savgol_coeffs(window_size, poly_order)
    return _clamped_convolve(arr, coeffs)


__all__ = [
    "gaussian_filter",
    "gaussian_kernel",
    "median_filter",
    "moving_average",
    "savitzky_golay",
]
