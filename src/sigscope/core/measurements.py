"""Time-domain signal measurements."""

from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np


def _as_series(data: Sequence[float]) -> np.ndarray:
    arr = np.asarray(data, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("data must not be empty")
    return arr


def rms(data: Sequence[float]) -> float:
    """Return the root-mean-square of *data*.

    ``ValueError`` is raised for empty sequences.
    """

    arr = _as_series(data)
    return math.sqrt(float(np.mean(arr * arr)))


def peak(data: Sequence[float]) -> float:
    """Largest absolute sample value."""

    return float(np.max(np.abs(_as_series(data))))


def peak_to_peak(data: Sequence[float]) -> float:
    arr = _as_series(data)
    return float(np.max(arr) - np.min(arr))


def snr(signal: Sequence[float], clean: Sequence[float]) -> float:
    """Signal-to-noise ratio in dB of ``signal`` against its ``clean`` reference.

    The noise is ``signal - clean``.  A noise-free signal gives ``inf``.
    """

    noisy = _as_series(signal)
    ref = _as_series(clean)
    if noisy.size != ref.size:
        raise ValueError("signal and clean reference must have the same length")
    noise_power = rms(noisy - ref) ** 2
    if noise_power == 0:
        return math.inf
    signal_power = rms(ref) ** 2
    if signal_power == 0:
        return -math.inf
    return 10.0 * math.log10(signal_power / noise_power)


def find_signal_peaks(data: Sequence[float], threshold: float = 0.1, min_distance: int = 1) -> List[int]:
    """Indices of local maxima of ``|data|``.

    A sample qualifies when its magnitude reaches ``threshold * peak(data)``
    and is strictly larger than every other magnitude within
    ``min_distance`` samples on either side.  Samples closer than
    ``min_distance`` to either end are not considered.
    """

    if min_distance < 1:
        raise ValueError("min_distance must be at least 1")
    mags = np.abs(_as_series(data))
    floor = float(np.max(mags)) * threshold
    peaks: List[int] = []
    for i in range(min_distance, mags.size - min_distance):
        current = mags[i]
        if current < floor:
            continue
        neighbours = np.concatenate((mags[i - min_distance : i], mags[i + 1 : i + min_distance + 1]))
        if np.all(neighbours < current):
            peaks.append(i)
    return peaks


__all__ = ["find_signal_peaks", "peak", "peak_to_peak", "rms", "snr"]
