"""Common type helpers for sigscope.

This module defines the configuration records consumed by the generator and
filter designers, and the result records returned by the analysers.  The
structures are plain dataclasses holding NumPy arrays so that callers can
forward them to any rendering or transport layer without conversion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

CHIRP_METHODS = ("linear", "logarithmic")
NOISE_TYPES = ("white", "pink", "brown")
FILTER_TYPES = ("lowpass", "highpass", "bandpass", "bandstop")


@dataclass(frozen=True)
class SignalConfig:
    """Parameters for a deterministic periodic waveform."""

    sample_rate: float
    duration: float
    amplitude: float = 1.0
    frequency: float = 1.0
    phase: float = 0.0
    offset: float = 0.0

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.duration < 0:
            raise ValueError("duration must not be negative")

    @property
    def num_samples(self) -> int:
        """Return ``round(sample_rate * duration)``.

        Exact half samples round to the nearest even count, so 2.5 gives 2.
        """

        return int(round(self.sample_rate * self.duration))

    def time_axis(self) -> np.ndarray:
        """Return the sample instants ``i / sample_rate`` in seconds."""

        return np.arange(self.num_samples, dtype=float) / self.sample_rate


@dataclass(frozen=True)
class ChirpConfig(SignalConfig):
    """Frequency sweep parameters.

    ``frequency`` is ignored; the sweep runs from ``start_frequency`` to
    ``end_frequency`` over ``duration`` seconds.
    """

    start_frequency: float = 1.0
    end_frequency: float = 1.0
    method: str = "linear"

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.method not in CHIRP_METHODS:
            raise ValueError(f"method must be one of {CHIRP_METHODS}, got {self.method!r}")
        if self.method == "logarithmic" and (self.start_frequency <= 0 or self.end_frequency <= 0):
            raise ValueError("logarithmic sweeps need positive start and end frequencies")


@dataclass(frozen=True)
class NoiseConfig:
    """Noise colour, scale and optional seed."""

    type: str = "white"
    amplitude: float = 1.0
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.type not in NOISE_TYPES:
            raise ValueError(f"noise type must be one of {NOISE_TYPES}, got {self.type!r}")


@dataclass(frozen=True)
class FilterConfig:
    """Specification handed to :class:`~sigscope.core.filters.DigitalFilter`."""

    type: str
    cutoff_frequency: float
    sample_rate: float
    cutoff_frequency2: Optional[float] = None
    order: int = 2

    @property
    def is_band(self) -> bool:
        """Return ``True`` for band-pass and band-stop filters."""

        return self.type in ("bandpass", "bandstop")


@dataclass(frozen=True)
class FFTResult:
    """One-sided spectrum of a real signal."""

    frequencies: np.ndarray
    magnitudes: np.ndarray
    phases: np.ndarray
    power_spectrum: np.ndarray
    sample_rate: float
    frequency_resolution: float

    def __len__(self) -> int:
        return len(self.frequencies)


@dataclass(frozen=True)
class SpectralPeak:
    """A local maximum of the magnitude spectrum."""

    frequency: float
    magnitude: float
    phase: float


@dataclass(frozen=True)
class Spectrogram:
    """Short-time power spectra stacked along the time axis."""

    time_axis: np.ndarray
    frequency_axis: np.ndarray
    power_matrix: np.ndarray


@dataclass(frozen=True)
class FilterResponse:
    """Magnitude and phase of a transfer function at given frequencies."""

    frequencies: np.ndarray
    magnitudes: np.ndarray
    phases: np.ndarray


@dataclass(frozen=True)
class Percentiles:
    p25: float
    p50: float
    p75: float
    p90: float
    p95: float
    p99: float


@dataclass(frozen=True)
class StatisticsResult:
    """Descriptive statistics of a sample sequence."""

    mean: float
    median: float
    mode: List[float]
    variance: float
    standard_deviation: float
    min: float
    max: float
    range: float
    skewness: float
    kurtosis: float
    count: int
    sum: float
    percentiles: Percentiles


@dataclass(frozen=True)
class HistogramData:
    """Bin centres and counts; ``edges`` has one more element than ``counts``."""

    bins: np.ndarray
    counts: np.ndarray
    bin_width: float
    total_count: int
    edges: np.ndarray = field(default_factory=lambda: np.empty(0))


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least squares fit ``y = slope * x + intercept``."""

    slope: float
    intercept: float
    r_squared: float
    correlation: float
    equation: str
    predicted_values: np.ndarray
    residuals: np.ndarray


@dataclass(frozen=True)
class OutlierResult:
    """Samples outside the interquartile fence."""

    outlier_indices: List[int]
    outlier_values: List[float]
    lower_bound: float
    upper_bound: float


@dataclass(frozen=True)
class Window:
    """Index based window used for segmenting sequences."""

    start: int
    end: int

    @property
    def width(self) -> int:
        """Return the number of elements covered by the window."""

        return self.end - self.start
