"""Core algorithms: generation, spectral analysis, filtering and statistics."""

from .complex import Complex
from .filters import (
    DigitalFilter,
    FilterDesignError,
    create_bandpass,
    create_bandstop,
    create_highpass,
    create_lowpass,
    create_notch,
)
from .generator import (
    add_noise,
    brown_noise,
    chirp,
    composite,
    cosine,
    pink_noise,
    pulse,
    sawtooth,
    sine,
    square,
    triangle,
    white_noise,
)
from .measurements import find_signal_peaks, peak, peak_to_peak, rms, snr
from .smoothing import gaussian_filter, median_filter, savitzky_golay
from .spectral import (
    SignalLengthError,
    dominant_frequency,
    fft,
    find_peaks,
    ifft,
    power_spectral_density,
    spectrogram,
    total_harmonic_distortion,
)
from .statistics import (
    basic_statistics,
    correlation,
    detect_outliers,
    exponential_moving_average,
    histogram,
    linear_regression,
    min_max_scale,
    normalize,
)
from .windowing import blackman, get_window, hamming, hanning, kaiser

__all__ = [
    "Complex",
    "DigitalFilter",
    "FilterDesignError",
    "SignalLengthError",
    "add_noise",
    "basic_statistics",
    "blackman",
    "brown_noise",
    "chirp",
    "composite",
    "correlation",
    "cosine",
    "create_bandpass",
    "create_bandstop",
    "create_highpass",
    "create_lowpass",
    "create_notch",
    "detect_outliers",
    "dominant_frequency",
    "exponential_moving_average",
    "fft",
    "find_peaks",
    "find_signal_peaks",
    "gaussian_filter",
    "get_window",
    "hamming",
    "hanning",
    "histogram",
    "ifft",
    "kaiser",
    "linear_regression",
    "median_filter",
    "min_max_scale",
    "normalize",
    "peak",
    "peak_to_peak",
    "pink_noise",
    "power_spectral_density",
    "pulse",
    "rms",
    "savitzky_golay",
    "sawtooth",
    "sine",
    "snr",
    "spectrogram",
    "square",
    "total_harmonic_distortion",
    "triangle",
    "white_noise",
]
