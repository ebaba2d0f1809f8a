"""FFT based spectral analysis.

The transform is a radix-2 Cooley-Tukey FFT.  Rather than recursing on even
and odd subsequences, the input is permuted into bit-reversed order once and
the butterflies of each stage are applied to all blocks at once, which yields
the same bin ordering as the recursive decimation-in-time formulation.

Higher level helpers zero-pad to a power of two, taper with a window from
:mod:`sigscope.core.windowing` and keep only the non-redundant half of the
spectrum of a real signal.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence

import numpy as np

from ..config import Settings
from ..types import FFTResult, SpectralPeak, Spectrogram
from ..utils.windows import window_slices
from .complex import Complex, Number
from .windowing import get_window

logger = logging.getLogger(__name__)


class SignalLengthError(ValueError):
    """Raised when a transform input does not have a power-of-two length."""


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two ``>= n`` (``1`` for ``n <= 1``)."""

    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def _bit_reversal(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def _transform(x: np.ndarray) -> np.ndarray:
    """Forward DFT of a complex array whose length is a power of two."""

    n = x.size
    if not is_power_of_two(n):
        raise SignalLengthError(f"FFT length must be a power of two, got {n}")
    a = x[_bit_reversal(n)].astype(complex)
    size = 2
    while size <= n:
        half = size // 2
        twiddle = np.exp(-2j * np.pi * np.arange(half) / size)
        blocks = a.reshape(-1, size)
        even = blocks[:, :half].copy()
        odd = blocks[:, half:] * twiddle
        blocks[:, :half] = even + odd
        blocks[:, half:] = even - odd
        size *= 2
    return a


def _as_complex_array(values: Iterable[Number]) -> np.ndarray:
    if isinstance(values, np.ndarray):
        return values.astype(complex).reshape(-1)
    return np.array([complex(v) for v in values], dtype=complex)


def fft(data: Sequence[Number]) -> np.ndarray:
    """Return the discrete Fourier transform of ``data``.

    ``data`` must have a power-of-two length; pad with
    :func:`pad_to_power_of_two` first otherwise.

    Raises
    ------
    SignalLengthError
        If ``len(data)`` is not a power of two.
    """

    return _transform(_as_complex_array(data))


def ifft(spectrum: Sequence[Number]) -> np.ndarray:
    """Inverse transform computed as ``conj(fft(conj(X))) / N``."""

    x = _as_complex_array(spectrum)
    return np.conj(_transform(np.conj(x))) / x.size


def ifft_real(spectrum: Sequence[Number]) -> np.ndarray:
    """Real part of :func:`ifft`, for spectra of real signals."""

    return ifft(spectrum).real


def to_complex_list(spectrum: np.ndarray) -> List[Complex]:
    """Convert a transform output to :class:`Complex` values."""

    return [Complex(float(c.real), float(c.imag)) for c in np.asarray(spectrum, dtype=complex)]


def pad_to_power_of_two(data: Sequence[float]) -> np.ndarray:
    """Zero-pad ``data`` up to the next power-of-two length."""

    arr = np.asarray(data, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("data must not be empty")
    n = next_power_of_two(arr.size)
    if n == arr.size:
        return arr.copy()
    logger.debug("zero padding %d samples to %d", arr.size, n)
    out = np.zeros(n, dtype=float)
    out[: arr.size] = arr
    return out


def apply_window(data: Sequence[float], window: str = "hanning") -> np.ndarray:
    """Multiply ``data`` by the named window of the same length."""

    arr = np.asarray(data, dtype=float).reshape(-1)
    return arr * get_window(window, arr.size)


def power_spectral_density(
    data: Sequence[float],
    sample_rate: float | None = None,
    window: str | None = None,
    *,
    settings: Settings | None = None,
) -> FFTResult:
    """Compute the one-sided magnitude, phase and power spectrum of ``data``.

    ``data`` is zero-padded to the next power of two ``N``, multiplied by
    ``window`` (one of ``hanning``, ``hamming``, ``blackman``, ``kaiser`` or
    ``none``) and transformed.  Only the first ``N/2`` bins are kept; bin
    ``k`` sits at ``k * sample_rate / N`` Hz and the power is the squared
    magnitude.

    Parameters
    ----------
    data:
        Real-valued samples.  Must not be empty.
    sample_rate:
        Sampling rate in Hz.  Defaults to ``settings.spectrum.sample_rate``.
    window:
        Window name.  Defaults to ``settings.spectrum.window``.
    """

    if settings is None:
        settings = Settings()
    if sample_rate is None:
        sample_rate = settings.spectrum.sample_rate
    if window is None:
        window = settings.spectrum.window
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")

    padded = pad_to_power_of_two(data)
    spectrum = fft(apply_window(padded, window))
    n = spectrum.size
    half = spectrum[: n // 2]
    magnitudes = np.abs(half)
    return FFTResult(
        frequencies=np.arange(n // 2, dtype=float) * sample_rate / n,
        magnitudes=magnitudes,
        phases=np.angle(half),
        power_spectrum=magnitudes * magnitudes,
        sample_rate=float(sample_rate),
        frequency_resolution=sample_rate / n,
    )


def find_peaks(
    data: Sequence[float],
    sample_rate: float | None = None,
    threshold: float | None = None,
    *,
    settings: Settings | None = None,
) -> List[SpectralPeak]:
    """Return spectral peaks of ``data`` sorted by descending magnitude.

    A bin is a peak when it is strictly greater than both neighbours and
    above ``threshold * max(magnitude)``.  The first and last bins are never
    reported.
    """

    if settings is None:
        settings = Settings()
    if threshold is None:
        threshold = settings.spectrum.peak_threshold

    result = power_spectral_density(data, sample_rate, settings=settings)
    mags = result.magnitudes
    if mags.size < 3:
        return []
    min_threshold = float(np.max(mags)) * threshold
    inner = mags[1:-1]
    mask = (inner > mags[:-2]) & (inner > mags[2:]) & (inner > min_threshold)
    idx = np.nonzero(mask)[0] + 1
    peaks = [
        SpectralPeak(
            frequency=float(result.frequencies[i]),
            magnitude=float(mags[i]),
            phase=float(result.phases[i]),
        )
        for i in idx
    ]
    return sorted(peaks, key=lambda p: p.magnitude, reverse=True)


def spectrogram(
    data: Sequence[float],
    sample_rate: float | None = None,
    window_size: int | None = None,
    overlap: float | None = None,
    *,
    settings: Settings | None = None,
) -> Spectrogram:
    """Short-time power spectra of ``data``.

    Segments of ``window_size`` samples start every
    ``floor(window_size * (1 - overlap))`` samples until the signal is
    covered; the last segment is zero padded.  Each segment goes through
    :func:`power_spectral_density` with a Hanning window.  Row ``i`` of
    ``power_matrix`` belongs to ``time_axis[i]``, the segment start in
    seconds.
    """

    if settings is None:
        settings = Settings()
    if sample_rate is None:
        sample_rate = settings.spectrum.sample_rate
    if window_size is None:
        window_size = settings.spectrum.window_size
    if overlap is None:
        overlap = settings.spectrum.overlap

    arr = np.asarray(data, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("data must not be empty")
    if window_size <= 0:
        raise ValueError("window_size must be positive")
    if not 0.0 <= overlap < 1.0:
        raise ValueError("overlap must lie in [0, 1)")
    hop = int(math.floor(window_size * (1.0 - overlap)))
    if hop < 1:
        raise ValueError("overlap leaves no hop between segments")

    segments = window_slices(arr, window_size, hop, pad=True)
    rows = [power_spectral_density(seg, sample_rate, "hanning").power_spectrum for seg in segments]
    n = next_power_of_two(window_size)
    return Spectrogram(
        time_axis=np.arange(len(segments), dtype=float) * hop / sample_rate,
        frequency_axis=np.arange(n // 2, dtype=float) * sample_rate / n,
        power_matrix=np.vstack(rows),
    )


def dominant_frequency(
    data: Sequence[float],
    sample_rate: float | None = None,
    *,
    ignore_dc: bool = False,
    settings: Settings | None = None,
) -> float:
    """Frequency of the largest magnitude bin of the spectrum."""

    result = power_spectral_density(data, sample_rate, settings=settings)
    mags = result.magnitudes
    if mags.size == 0:
        return 0.0
    start = 1 if ignore_dc and mags.size > 1 else 0
    return float(result.frequencies[start + int(np.argmax(mags[start:]))])


def total_harmonic_distortion(
    data: Sequence[float],
    sample_rate: float,
    fundamental: float,
    harmonics: int = 5,
    *,
    window: str = "hanning",
) -> float:
    """Total harmonic distortion of ``data`` in percent.

    The magnitude at each of the ``harmonics`` orders above the fundamental
    (``2*f0 .. (harmonics+1)*f0``) is read from the largest of the three bins
    around the nominal frequency.  Orders above Nyquist are skipped.  Returns
    ``0.0`` when the fundamental magnitude is zero.
    """

    if fundamental <= 0:
        raise ValueError("fundamental must be positive")
    if harmonics < 1:
        raise ValueError("harmonics must be at least 1")
    result = power_spectral_density(data, sample_rate, window)
    mags = result.magnitudes

    def level(freq: float) -> float:
        k = int(round(freq / result.frequency_resolution))
        lo, hi = max(k - 1, 0), min(k + 2, mags.size)
        return float(np.max(mags[lo:hi]))

    base = level(fundamental)
    if base == 0:
        return 0.0
    nyquist = sample_rate / 2.0
    power = 0.0
    for order in range(2, harmonics + 2):
        freq = order * fundamental
        if freq >= nyquist:
            break
        power += level(freq) ** 2
    return 100.0 * math.sqrt(power) / base


__all__ = [
    "SignalLengthError",
    "apply_window",
    "dominant_frequency",
    "fft",
    "find_peaks",
    "ifft",
    "ifft_real",
    "is_power_of_two",
    "next_power_of_two",
    "pad_to_power_of_two",
    "power_spectral_density",
    "spectrogram",
    "to_complex_list",
    "total_harmonic_distortion",
]
