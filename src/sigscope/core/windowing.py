"""Tapering window functions.

All windows are symmetric and evaluated over ``n = 0 .. length-1`` with the
period ``length - 1``.  They are used standalone and as the pre-processing
step of :func:`sigscope.core.spectral.power_spectral_density`.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

KAISER_BETA = 5.0
_BESSEL_MAX_TERMS = 50
_BESSEL_TOLERANCE = 1e-12


def bessel_i0(x: float) -> float:
    """Zeroth-order modified Bessel function of the first kind.

    Evaluated with the power series ``sum((x^2/4)^k / (k!)^2)`` truncated after
    50 terms or once a term drops below ``1e-12``.
    """

    total = 1.0
    term = 1.0
    quarter_sq = x * x / 4.0
    for k in range(1, _BESSEL_MAX_TERMS + 1):
        term *= quarter_sq / (k * k)
        total += term
        if term < _BESSEL_TOLERANCE:
            break
    return total


def _phase_grid(length: int) -> np.ndarray:
    if length < 0:
        raise ValueError("window length must not be negative")
    if length == 1:
        return np.zeros(1)
    return 2.0 * np.pi * np.arange(length, dtype=float) / (length - 1)


def rectangular(length: int) -> np.ndarray:
    if length < 0:
        raise ValueError("window length must not be negative")
    return np.ones(length, dtype=float)


def hanning(length: int) -> np.ndarray:
    """Hann window ``0.5 * (1 - cos(2*pi*n/(N-1)))``."""

    if length == 1:
        return np.ones(1)
    return 0.5 * (1.0 - np.cos(_phase_grid(length)))


def hamming(length: int) -> np.ndarray:
    """Hamming window ``0.54 - 0.46 * cos(2*pi*n/(N-1))``."""

    if length == 1:
        return np.ones(1)
    return 0.54 - 0.46 * np.cos(_phase_grid(length))


def blackman(length: int) -> np.ndarray:
    if length == 1:
        return np.ones(1)
    grid = _phase_grid(length)
    return 0.42 - 0.5 * np.cos(grid) + 0.08 * np.cos(2.0 * grid)


def kaiser(length: int, beta: float = KAISER_BETA) -> np.ndarray:
    """Kaiser window ``I0(beta*sqrt(1-x^2)) / I0(beta)`` with ``x`` in ``[-1, 1]``."""

    if length < 0:
        raise ValueError("window length must not be negative")
    if length <= 1:
        return np.ones(length, dtype=float)
    alpha = (length - 1) / 2.0
    x = (np.arange(length, dtype=float) - alpha) / alpha
    arg = beta * np.sqrt(np.clip(1.0 - x * x, 0.0, None))
    denom = bessel_i0(beta)
    return np.array([bessel_i0(float(v)) for v in arg]) / denom


WINDOWS: Dict[str, Callable[[int], np.ndarray]] = {
    "hanning": hanning,
    "hamming": hamming,
    "blackman": blackman,
    "kaiser": kaiser,
    "none": rectangular,
}


def get_window(name: str, length: int) -> np.ndarray:
    """Return the window called ``name`` evaluated at ``length`` points."""

    try:
        fn = WINDOWS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown window {name!r}; expected one of {sorted(WINDOWS)}") from None
    return fn(length)


__all__ = [
    "KAISER_BETA",
    "WINDOWS",
    "bessel_i0",
    "blackman",
    "get_window",
    "hamming",
    "hanning",
    "kaiser",
    "rectangular",
]
