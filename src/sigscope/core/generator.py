"""Deterministic waveform and noise synthesis.

Every periodic generator evaluates its waveform at ``t = i / sample_rate`` for
``i in range(round(sample_rate * duration))`` and returns a float64 array.
The waveforms are pure functions of their :class:`~sigscope.types.SignalConfig`.

Noise generators draw from a uniform source.  Passing ``seed`` selects the
32-bit linear congruential recurrence

.. math::

   s_{k+1} = (1664525 s_k + 1013904223) \\bmod 2^{32}, \\qquad u_k = s_k / 2^{32}

so seeded sequences are reproducible bit-for-bit.  Without a seed a fresh
:func:`numpy.random.default_rng` supplies the uniforms.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Sequence

import numpy as np

from ..config import Settings
from ..types import ChirpConfig, NoiseConfig, SignalConfig

logger = logging.getLogger(__name__)

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32
PINK_GENERATORS = 16
BROWN_STEP = 0.1

UniformSource = Callable[[], float]


class LinearCongruential:
    """Seeded uniform generator on ``[0, 1)``."""

    def __init__(self, seed: int) -> None:
        self.state = int(seed) % LCG_MODULUS

    def random(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    __call__ = random


def uniform_source(seed: Optional[int] = None) -> UniformSource:
    """Return a callable producing uniforms on ``[0, 1)``."""

    if seed is not None:
        return LinearCongruential(seed)
    rng = np.random.default_rng()
    return lambda: float(rng.random())


def config_from_settings(settings: Settings | None = None, **overrides: float) -> SignalConfig:
    """Build a :class:`SignalConfig` from ``settings.generator``.

    Keyword arguments that are not ``None`` override the configured values.
    """

    if settings is None:
        settings = Settings()
    gen = settings.generator
    values = {
        "sample_rate": gen.sample_rate,
        "duration": gen.duration,
        "amplitude": gen.amplitude,
        "frequency": gen.frequency,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return SignalConfig(**values)


# ---------------------------------------------------------------------------
# Periodic waveforms
# ---------------------------------------------------------------------------


def _normalized_phase(config: SignalConfig) -> np.ndarray:
    """Return ``(f*t + phase/2pi) mod 1`` for each sample instant."""

    t = config.time_axis()
    return np.mod(config.frequency * t + config.phase / (2.0 * math.pi), 1.0)


def _angle(config: SignalConfig) -> np.ndarray:
    return 2.0 * math.pi * config.frequency * config.time_axis() + config.phase


def sine(config: SignalConfig) -> np.ndarray:
    return config.amplitude * np.sin(_angle(config)) + config.offset


def cosine(config: SignalConfig) -> np.ndarray:
    return config.amplitude * np.cos(_angle(config)) + config.offset


def square(config: SignalConfig) -> np.ndarray:
    """Square wave ``amplitude * sign(sin(...)) + offset``.

    Samples falling exactly on a zero crossing of the underlying sine take
    the value ``offset``.
    """

    return config.amplitude * np.sign(np.sin(_angle(config))) + config.offset


def triangle(config: SignalConfig) -> np.ndarray:
    """Triangle wave rising from -1 to 1 over the first half period."""

    u = _normalized_phase(config)
    shape = np.where(u < 0.5, 4.0 * u - 1.0, 3.0 - 4.0 * u)
    return config.amplitude * shape + config.offset


def sawtooth(config: SignalConfig) -> np.ndarray:
    u = _normalized_phase(config)
    return config.amplitude * (2.0 * u - 1.0) + config.offset


def pulse(config: SignalConfig, duty_cycle: float = 0.5) -> np.ndarray:
    """Rectangular pulse train, ``+amplitude`` for the first ``duty_cycle`` of each period."""

    if not 0.0 <= duty_cycle <= 1.0:
        raise ValueError("duty_cycle must lie in [0, 1]")
    u = _normalized_phase(config)
    return np.where(u < duty_cycle, config.amplitude, -config.amplitude) + config.offset


def chirp(config: ChirpConfig) -> np.ndarray:
    """Frequency sweep from ``start_frequency`` to ``end_frequency``.

    The linear sweep integrates ``f(t) = f0 + (f1 - f0) t / T`` to

    ``phi(t) = 2*pi*(f0*t + 0.5*(f1 - f0)*t^2 / T)``

    while the logarithmic sweep integrates ``f(t) = f0 * (f1/f0)^(t/T)`` to

    ``phi(t) = 2*pi*f0*T*((f1/f0)^(t/T) - 1) / ln(f1/f0)``.
    """

    t = config.time_axis()
    f0 = config.start_frequency
    f1 = config.end_frequency
    T = config.duration
    if T == 0 or t.size == 0:
        return np.empty(0, dtype=float)

    if config.method == "linear":
        phi = 2.0 * math.pi * (f0 * t + 0.5 * (f1 - f0) * t * t / T)
    elif f0 == f1:
        phi = 2.0 * math.pi * f0 * t
    else:
        ratio = f1 / f0
        phi = 2.0 * math.pi * f0 * T * (np.power(ratio, t / T) - 1.0) / math.log(ratio)
    return config.amplitude * np.sin(phi + config.phase) + config.offset


# ---------------------------------------------------------------------------
# Noise
# ---------------------------------------------------------------------------


def _check_samples(samples: int) -> int:
    samples = int(samples)
    if samples < 0:
        raise ValueError("samples must not be negative")
    return samples


def white_noise(samples: int, amplitude: float = 1.0, seed: Optional[int] = None) -> np.ndarray:
    """Gaussian white noise via the Box-Muller transform.

    Each output sample consumes two uniforms ``u1, u2`` and takes
    ``sqrt(-2 ln u1) * cos(2 pi u2)``.  A zero ``u1`` is redrawn.
    """

    samples = _check_samples(samples)
    draw = uniform_source(seed)
    out = np.empty(samples, dtype=float)
    for i in range(samples):
        u1 = draw()
        while u1 <= 0.0:
            u1 = draw()
        u2 = draw()
        out[i] = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return amplitude * out


def pink_noise(samples: int, amplitude: float = 1.0, seed: Optional[int] = None) -> np.ndarray:
    """Approximate 1/f noise with the Voss-McCartney scheme.

    Sixteen uniform generators are summed; generator ``j`` is refreshed on
    sample ``i`` whenever bit ``j`` of ``i`` is clear, so low-order generators
    change often and high-order ones rarely.
    """

    samples = _check_samples(samples)
    draw = uniform_source(seed)
    values = [0.0] * PINK_GENERATORS
    total = 0.0
    out = np.empty(samples, dtype=float)
    for i in range(samples):
        for j in range(PINK_GENERATORS):
            if i & (1 << j) == 0:
                total -= values[j]
                values[j] = (draw() - 0.5) * 2.0
                total += values[j]
        out[i] = total / PINK_GENERATORS
    return amplitude * out


def brown_noise(samples: int, amplitude: float = 1.0, seed: Optional[int] = None) -> np.ndarray:
    """Random walk of uniform increments in ``[-0.05, 0.05)``."""

    samples = _check_samples(samples)
    draw = uniform_source(seed)
    out = np.empty(samples, dtype=float)
    value = 0.0
    for i in range(samples):
        value += (draw() - 0.5) * BROWN_STEP
        out[i] = value
    return amplitude * out


_NOISE = {
    "white": white_noise,
    "pink": pink_noise,
    "brown": brown_noise,
}


def noise(samples: int, config: NoiseConfig) -> np.ndarray:
    """Generate ``samples`` points of the noise described by ``config``."""

    return _NOISE[config.type](samples, config.amplitude, config.seed)


# ---------------------------------------------------------------------------
# Combination
# ---------------------------------------------------------------------------


def composite(signals: Sequence[Sequence[float]]) -> np.ndarray:
    """Sum ``signals`` elementwise, truncated to the shortest input."""

    if len(signals) == 0:
        return np.empty(0, dtype=float)
    arrays = [np.asarray(s, dtype=float).reshape(-1) for s in signals]
    length = min(a.size for a in arrays)
    if length < max(a.size for a in arrays):
        logger.debug("composite truncated to %d samples", length)
    return np.sum([a[:length] for a in arrays], axis=0)


def add_noise(signal: Sequence[float], noise_config: NoiseConfig) -> np.ndarray:
    """Return ``signal`` plus freshly generated noise of matching length."""

    arr = np.asarray(signal, dtype=float).reshape(-1)
    return arr + noise(arr.size, noise_config)


WAVEFORMS = {
    "sine": sine,
    "cosine": cosine,
    "square": square,
    "triangle": triangle,
    "sawtooth": sawtooth,
    "pulse": pulse,
}


__all__ = [
    "LinearCongruential",
    "WAVEFORMS",
    "add_noise",
    "brown_noise",
    "chirp",
    "composite",
    "config_from_settings",
    "cosine",
    "noise",
    "pink_noise",
    "pulse",
    "sawtooth",
    "sine",
    "square",
    "triangle",
    "uniform_source",
    "white_noise",
]
