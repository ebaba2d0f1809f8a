"""IIR digital filters designed from first/second-order Butterworth prototypes.

A :class:`DigitalFilter` derives its coefficients once, at construction, by a
bilinear-transform approximation:

* the cutoff is normalised to the Nyquist frequency, ``fc = f / (fs/2)``, and
  prewarped to ``wc = tan(pi * fc / 2)``;
* low-pass and high-pass filters use the first-order section for
  ``order == 1`` and the second-order section (damping ``sqrt(2)``) for any
  higher order;
* band-pass and band-stop filters substitute the geometric centre
  ``sqrt(f1 * f2)`` and the bandwidth ``f2 - f1`` into a simplified biquad.

Coefficients are normalised so that ``a[0] == 1`` and the filter runs the
direct-form recurrence

.. math::

   y[n] = \\sum_i b_i x[n-i] - \\sum_{i \\ge 1} a_i y[n-i]

keeping its input and output history between calls, so a stream can be fed
one sample or one block at a time.  A filter instance must have a single
owner; nothing here is synchronised.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from ..config import Settings
from ..types import FILTER_TYPES, FilterConfig, FilterResponse
from .complex import Complex

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2.0)


class FilterDesignError(ValueError):
    """Raised when a :class:`FilterConfig` cannot be turned into coefficients."""


class DelayLine:
    """Fixed-capacity history with the newest value at index 0.

    ``push`` overwrites the oldest slot and moves the head back by one, so no
    values are shifted.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._buf = [0.0] * capacity
        self._head = 0

    def __len__(self) -> int:
        return len(self._buf)

    def __getitem__(self, i: int) -> float:
        if not 0 <= i < len(self._buf):
            raise IndexError("delay line index out of range")
        return self._buf[(self._head + i) % len(self._buf)]

    def push(self, value: float) -> None:
        self._head = (self._head - 1) % len(self._buf)
        self._buf[self._head] = value

    def dot(self, coeffs: Sequence[float]) -> float:
        """Return ``sum(coeffs[i] * self[i])``."""

        n = len(self._buf)
        head = self._head
        buf = self._buf
        return sum(c * buf[(head + i) % n] for i, c in enumerate(coeffs))

    def clear(self) -> None:
        self._buf = [0.0] * len(self._buf)
        self._head = 0

    def to_list(self) -> List[float]:
        return [self[i] for i in range(len(self._buf))]


# ---------------------------------------------------------------------------
# Coefficient design
# ---------------------------------------------------------------------------

Coefficients = Tuple[List[float], List[float]]


def _prewarp(fc: float) -> float:
    return math.tan(math.pi * fc / 2.0)


def _lowpass(fc: float, order: int) -> Coefficients:
    k = _prewarp(fc)
    if order == 1:
        norm = 1.0 + k
        return [k / norm, k / norm], [1.0, (k - 1.0) / norm]
    k2 = k * k
    norm = 1.0 + SQRT2 * k + k2
    return (
        [k2 / norm, 2.0 * k2 / norm, k2 / norm],
        [1.0, 2.0 * (k2 - 1.0) / norm, (1.0 - SQRT2 * k + k2) / norm],
    )


def _highpass(fc: float, order: int) -> Coefficients:
    k = _prewarp(fc)
    if order == 1:
        norm = 1.0 + k
        return [1.0 / norm, -1.0 / norm], [1.0, (k - 1.0) / norm]
    k2 = k * k
    norm = 1.0 + SQRT2 * k + k2
    return (
        [1.0 / norm, -2.0 / norm, 1.0 / norm],
        [1.0, 2.0 * (k2 - 1.0) / norm, (1.0 - SQRT2 * k + k2) / norm],
    )


def _band_terms(fc1: float, fc2: float) -> Tuple[float, float, float]:
    f1, f2 = sorted((fc1, fc2))
    wc = _prewarp(math.sqrt(f1 * f2))
    bw = _prewarp(f2 - f1)
    wc2 = wc * wc
    return wc2, bw, 1.0 + bw + wc2


def _bandpass(fc1: float, fc2: float) -> Coefficients:
    wc2, bw, norm = _band_terms(fc1, fc2)
    return (
        [bw / norm, 0.0, -bw / norm],
        [1.0, 2.0 * (wc2 - 1.0) / norm, (1.0 - bw + wc2) / norm],
    )


def _bandstop(fc1: float, fc2: float) -> Coefficients:
    wc2, bw, norm = _band_terms(fc1, fc2)
    return (
        [(1.0 + wc2) / norm, 2.0 * (wc2 - 1.0) / norm, (1.0 + wc2) / norm],
        [1.0, 2.0 * (wc2 - 1.0) / norm, (1.0 - bw + wc2) / norm],
    )


def design_coefficients(config: FilterConfig) -> Coefficients:
    """Return ``(b, a)`` for ``config``.

    Raises
    ------
    FilterDesignError
        For unknown types, non-positive orders or sample rates, cutoffs
        outside ``(0, sample_rate/2)``, and band filters without a distinct
        ``cutoff_frequency2``.
    """

    if config.type not in FILTER_TYPES:
        raise FilterDesignError(f"filter type must be one of {FILTER_TYPES}, got {config.type!r}")
    if config.sample_rate <= 0:
        raise FilterDesignError("sample_rate must be positive")
    if int(config.order) != config.order or config.order < 1:
        raise FilterDesignError("order must be a positive integer")
    nyquist = config.sample_rate / 2.0

    def normalise(freq: float, name: str) -> float:
        if not 0.0 < freq < nyquist:
            raise FilterDesignError(f"{name} must lie in (0, {nyquist}), got {freq}")
        return freq / nyquist

    fc = normalise(config.cutoff_frequency, "cutoff_frequency")
    if not config.is_band:
        if config.type == "lowpass":
            return _lowpass(fc, config.order)
        return _highpass(fc, config.order)

    if config.cutoff_frequency2 is None:
        raise FilterDesignError(f"{config.type} filters need cutoff_frequency2")
    fc2 = normalise(config.cutoff_frequency2, "cutoff_frequency2")
    if fc2 == fc:
        raise FilterDesignError("band edges must differ")
    if config.type == "bandpass":
        return _bandpass(fc, fc2)
    return _bandstop(fc, fc2)


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


class DigitalFilter:
    """Stateful IIR filter built from a :class:`FilterConfig`."""

    def __init__(self, config: FilterConfig) -> None:
        self._config = config
        b, a = design_coefficients(config)
        self._b = b
        self._a = a
        self._x = DelayLine(len(b))
        self._y = DelayLine(len(a) - 1)
        if config.order > 2:
            logger.debug("order %d realised as a single second-order section", config.order)
        logger.debug("designed %s filter b=%s a=%s", config.type, b, a)

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def b(self) -> Tuple[float, ...]:
        """Feed-forward coefficients."""

        return tuple(self._b)

    @property
    def a(self) -> Tuple[float, ...]:
        """Feedback coefficients, ``a[0] == 1``."""

        return tuple(self._a)

    def process_sample(self, x: float) -> float:
        """Filter one sample and advance the filter state."""

        self._x.push(float(x))
        y = self._x.dot(self._b) - self._y.dot(self._a[1:])
        self._y.push(y)
        return y

    def process_data(self, data: Sequence[float]) -> np.ndarray:
        """Filter ``data`` sample by sample.

        The state carries over, so a following :meth:`process_sample` call
        continues where the block ended.
        """

        return np.array([self.process_sample(x) for x in np.asarray(data, dtype=float).reshape(-1)])

    def reset(self) -> None:
        """Zero the input and output history, keeping the coefficients."""

        self._x.clear()
        self._y.clear()

    def state(self) -> Tuple[List[float], List[float]]:
        """Return ``(input_history, output_history)``, newest first."""

        return self._x.to_list(), self._y.to_list()

    def frequency_response(self, frequencies: Sequence[float]) -> FilterResponse:
        """Evaluate ``H = B(z)/A(z)`` on the unit circle.

        ``z = e^(j*w)`` with ``w = 2*pi*f/sample_rate``; both polynomials are
        in powers of ``z^-1`` so the phase matches the recurrence run by
        :meth:`process_sample`.  The filter state is not touched.
        """

        freqs = np.asarray(frequencies, dtype=float).reshape(-1)
        mags = np.empty(freqs.size, dtype=float)
        phases = np.empty(freqs.size, dtype=float)
        for i, f in enumerate(freqs):
            omega = 2.0 * math.pi * f / self._config.sample_rate
            z_inv = Complex.from_polar(1.0, -omega)
            h = _polyval(self._b, z_inv).divide(_polyval(self._a, z_inv))
            mags[i] = h.magnitude()
            phases[i] = h.phase()
        return FilterResponse(frequencies=freqs, magnitudes=mags, phases=phases)

    get_frequency_response = frequency_response

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"DigitalFilter({self._config!r})"


def _polyval(coeffs: Sequence[float], z_inv: Complex) -> Complex:
    """Horner evaluation of ``sum(c[i] * z_inv**i)``."""

    acc = Complex()
    for c in reversed(coeffs):
        acc = acc.multiply(z_inv).add(c)
    return acc


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def _order(order: int | None, settings: Settings | None) -> int:
    if order is not None:
        return order
    if settings is None:
        settings = Settings()
    return settings.filter.order


def create_lowpass(
    cutoff: float, sample_rate: float, order: int | None = None, *, settings: Settings | None = None
) -> DigitalFilter:
    return DigitalFilter(FilterConfig("lowpass", cutoff, sample_rate, order=_order(order, settings)))


def create_highpass(
    cutoff: float, sample_rate: float, order: int | None = None, *, settings: Settings | None = None
) -> DigitalFilter:
    return DigitalFilter(FilterConfig("highpass", cutoff, sample_rate, order=_order(order, settings)))


def create_bandpass(
    low_cutoff: float,
    high_cutoff: float,
    sample_rate: float,
    order: int | None = None,
    *,
    settings: Settings | None = None,
) -> DigitalFilter:
    return DigitalFilter(
        FilterConfig("bandpass", low_cutoff, sample_rate, cutoff_frequency2=high_cutoff, order=_order(order, settings))
    )


def create_bandstop(
    low_cutoff: float,
    high_cutoff: float,
    sample_rate: float,
    order: int | None = None,
    *,
    settings: Settings | None = None,
) -> DigitalFilter:
    return DigitalFilter(
        FilterConfig("bandstop", low_cutoff, sample_rate, cutoff_frequency2=high_cutoff, order=_order(order, settings))
    )


def create_notch(
    notch_frequency: float,
    sample_rate: float,
    bandwidth: float | None = None,
    *,
    settings: Settings | None = None,
) -> DigitalFilter:
    """Band-stop filter spanning ``notch_frequency +/- bandwidth/2``.

    ``bandwidth`` defaults to ``settings.filter.notch_bandwidth``.
    """

    if bandwidth is None:
        if settings is None:
            settings = Settings()
        bandwidth = settings.filter.notch_bandwidth
    return create_bandstop(
        notch_frequency - bandwidth / 2.0,
        notch_frequency + bandwidth / 2.0,
        sample_rate,
        order=2,
    )


__all__ = [
    "DelayLine",
    "DigitalFilter",
    "FilterDesignError",
    "create_bandpass",
    "create_bandstop",
    "create_highpass",
    "create_lowpass",
    "create_notch",
    "design_coefficients",
]
