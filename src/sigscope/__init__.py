"""Signal analysis toolkit for simulated test-and-measurement instruments.

The :mod:`sigscope.core` package holds the numerical routines; this top level
re-exports the configuration objects and the record types they exchange.
"""

from .config import Settings, load_settings
from .types import (
    ChirpConfig,
    FFTResult,
    FilterConfig,
    FilterResponse,
    HistogramData,
    NoiseConfig,
    OutlierResult,
    RegressionResult,
    SignalConfig,
    SpectralPeak,
    Spectrogram,
    StatisticsResult,
)

__version__ = "0.1.0"

__all__ = [
    "ChirpConfig",
    "FFTResult",
    "FilterConfig",
    "FilterResponse",
    "HistogramData",
    "NoiseConfig",
    "OutlierResult",
    "RegressionResult",
    "Settings",
    "SignalConfig",
    "SpectralPeak",
    "Spectrogram",
    "StatisticsResult",
    "load_settings",
]
