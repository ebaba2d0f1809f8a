"""Descriptive statistics, histograms and regression.

All functions are pure: they take a sample sequence and return new values.
Empty input raises ``ValueError`` everywhere.  Degenerate but valid inputs
return fixed sentinels instead of failing:

* skewness is ``nan`` for fewer than 3 samples and kurtosis for fewer than
  4, because their bias corrections divide by ``(n-1)(n-2)`` and
  ``(n-1)(n-2)(n-3)``; with enough samples but zero spread both are ``0``;
* :func:`correlation` returns ``0`` when either input has zero variance;
* :func:`normalize` returns zeros and :func:`min_max_scale` the midpoint of
  the target range for constant input.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import List, Sequence

import numpy as np

from ..config import Settings
from ..types import HistogramData, OutlierResult, Percentiles, RegressionResult, StatisticsResult

MIN_SAMPLES_SKEWNESS = 3
MIN_SAMPLES_KURTOSIS = 4


def _as_series(data: Sequence[float]) -> np.ndarray:
    arr = np.asarray(data, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("data must not be empty")
    return arr


def percentile(sorted_data: Sequence[float], p: float) -> float:
    """Percentile ``p`` (0-100) of already sorted data.

    The rank ``p/100 * (n-1)`` is interpolated linearly between the
    neighbouring order statistics.
    """

    arr = _as_series(sorted_data)
    if not 0.0 <= p <= 100.0:
        raise ValueError("p must lie in [0, 100]")
    index = p / 100.0 * (arr.size - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(arr[lower])
    weight = index - lower
    return float(arr[lower] * (1.0 - weight) + arr[upper] * weight)


def mode(data: Sequence[float]) -> List[float]:
    """All values sharing the highest frequency, in ascending order."""

    arr = _as_series(data)
    counts = Counter(float(v) for v in arr)
    top = max(counts.values())
    return sorted(v for v, c in counts.items() if c == top)


def _skewness(arr: np.ndarray, mean: float, sd: float) -> float:
    n = arr.size
    if n < MIN_SAMPLES_SKEWNESS:
        return math.nan
    if sd == 0:
        return 0.0
    total = float(np.sum(((arr - mean) / sd) ** 3))
    return n / ((n - 1) * (n - 2)) * total


def _kurtosis(arr: np.ndarray, mean: float, sd: float) -> float:
    n = arr.size
    if n < MIN_SAMPLES_KURTOSIS:
        return math.nan
    if sd == 0:
        return 0.0
    total = float(np.sum(((arr - mean) / sd) ** 4))
    scaled = n * (n + 1) / ((n - 1) * (n - 2) * (n - 3)) * total
    correction = 3.0 * (n - 1) ** 2 / ((n - 2) * (n - 3))
    return scaled - correction


def basic_statistics(data: Sequence[float]) -> StatisticsResult:
    """Compute the descriptive statistics of ``data``.

    Variance and standard deviation are population values (divide by
    ``n``).  Skewness and excess kurtosis carry the usual small-sample bias
    corrections and are standardised by the population deviation.
    """

    arr = _as_series(data)
    srt = np.sort(arr)
    n = arr.size
    total = float(np.sum(arr))
    mean = total / n
    if n % 2 == 0:
        median = float((srt[n // 2 - 1] + srt[n // 2]) / 2.0)
    else:
        median = float(srt[n // 2])
    variance = float(np.sum((arr - mean) ** 2) / n)
    sd = math.sqrt(variance)
    lo, hi = float(srt[0]), float(srt[-1])

    return StatisticsResult(
        mean=mean,
        median=median,
        mode=mode(arr),
        variance=variance,
        standard_deviation=sd,
        min=lo,
        max=hi,
        range=hi - lo,
        skewness=_skewness(arr, mean, sd),
        kurtosis=_kurtosis(arr, mean, sd),
        count=n,
        sum=total,
        percentiles=Percentiles(
            p25=percentile(srt, 25),
            p50=median,
            p75=percentile(srt, 75),
            p90=percentile(srt, 90),
            p95=percentile(srt, 95),
            p99=percentile(srt, 99),
        ),
    )


def histogram(
    data: Sequence[float],
    bins: int | Sequence[float] | None = None,
    *,
    settings: Settings | None = None,
) -> HistogramData:
    """Count ``data`` into bins.

    ``bins`` is either a bin count, giving equal-width bins spanning
    ``[min, max]``, or an explicit sequence of edges (sorted here).  Each
    value lands in the first half-open bin ``[e_i, e_i+1)`` that holds it;
    the last bin also includes its right edge.  Values outside explicit
    edges are not counted.  Constant data with a bin count is spread over a
    unit span centred on the value.

    ``bin_width`` is reported for equal-width bins only and is ``0`` for
    explicit edges.  Non-finite samples raise ``ValueError``.
    """

    arr = _as_series(data)
    if not np.all(np.isfinite(arr)):
        raise ValueError("data must be finite")
    if bins is None:
        if settings is None:
            settings = Settings()
        bins = settings.statistics.histogram_bins

    if isinstance(bins, (int, np.integer)):
        if bins <= 0:
            raise ValueError("bins must be positive")
        lo, hi = float(np.min(arr)), float(np.max(arr))
        if hi == lo:
            lo, hi = lo - 0.5, hi + 0.5
        width = (hi - lo) / bins
        edges = lo + width * np.arange(bins + 1, dtype=float)
        edges[-1] = hi
    else:
        edges = np.sort(np.asarray(bins, dtype=float).reshape(-1))
        if edges.size < 2:
            raise ValueError("at least two bin edges are required")
        width = 0.0

    nbins = edges.size - 1
    idx = np.searchsorted(edges, arr, side="right") - 1
    idx[arr == edges[-1]] = nbins - 1
    inside = (idx >= 0) & (idx < nbins)
    counts = np.bincount(idx[inside], minlength=nbins)

    return HistogramData(
        bins=(edges[:-1] + edges[1:]) / 2.0,
        counts=counts,
        bin_width=float(width),
        total_count=int(arr.size),
        edges=edges,
    )


def _paired(x: Sequence[float], y: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    xa = np.asarray(x, dtype=float).reshape(-1)
    ya = np.asarray(y, dtype=float).reshape(-1)
    if xa.size != ya.size or xa.size == 0:
        raise ValueError("x and y must be non-empty and of equal length")
    return xa, ya


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Ordinary least squares fit of ``y`` on ``x``.

    Raises
    ------
    ValueError
        If the inputs are empty, differ in length or ``x`` is constant.
    """

    xa, ya = _paired(x, y)
    n = xa.size
    sum_x = float(np.sum(xa))
    sum_y = float(np.sum(ya))
    sum_xy = float(np.sum(xa * ya))
    sum_xx = float(np.sum(xa * xa))
    sum_yy = float(np.sum(ya * ya))

    sxx = n * sum_xx - sum_x * sum_x
    if sxx == 0:
        raise ValueError("x must not be constant")
    sxy = n * sum_xy - sum_x * sum_y
    syy = n * sum_yy - sum_y * sum_y

    slope = sxy / sxx
    intercept = sum_y / n - slope * sum_x / n
    denom = math.sqrt(sxx * syy) if sxx * syy > 0 else 0.0
    r = sxy / denom if denom else 0.0
    predicted = slope * xa + intercept

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r * r,
        correlation=r,
        equation=f"y = {slope:.4f}x + {intercept:.4f}",
        predicted_values=predicted,
        residuals=ya - predicted,
    )


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation from mean-centred sums; ``0`` for zero variance."""

    xa, ya = _paired(x, y)
    dx = xa - xa.mean()
    dy = ya - ya.mean()
    denom = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denom == 0:
        return 0.0
    return float(np.sum(dx * dy)) / denom


def moving_average(data: Sequence[float], window: int) -> np.ndarray:
    """Compute the trailing simple moving average over *data*.

    The result has ``len(data) - window + 1`` elements.  ``ValueError`` is
    raised if ``window`` is not positive or greater than ``len(data)``.
    """

    arr = np.asarray(data, dtype=float).reshape(-1)
    if window <= 0:
        raise ValueError("window must be positive")
    if window > arr.size:
        raise ValueError("window larger than data")
    out = np.empty(arr.size - window + 1, dtype=float)
    total = float(np.sum(arr[:window]))
    out[0] = total / window
    for i in range(window, arr.size):
        total += arr[i] - arr[i - window]
        out[i - window + 1] = total / window
    return out


def exponential_moving_average(
    data: Sequence[float],
    alpha: float | None = None,
    *,
    settings: Settings | None = None,
) -> np.ndarray:
    """Exponential smoothing seeded with the first sample.

    ``ema[0] = data[0]`` and ``ema[i] = alpha * data[i] + (1 - alpha) * ema[i-1]``.
    ``alpha`` defaults to ``settings.statistics.ema_alpha`` and must lie in
    ``(0, 1]``.
    """

    if alpha is None:
        if settings is None:
            settings = Settings()
        alpha = settings.statistics.ema_alpha
    if not 0.0 < alpha <= 1.0:
        raise ValueError("alpha must lie in (0, 1]")
    arr = _as_series(data)
    out = np.empty(arr.size, dtype=float)
    ema = arr[0]
    out[0] = ema
    for i in range(1, arr.size):
        ema = alpha * arr[i] + (1.0 - alpha) * ema
        out[i] = ema
    return out


def detect_outliers(
    data: Sequence[float],
    factor: float | None = None,
    *,
    settings: Settings | None = None,
) -> OutlierResult:
    """Flag samples outside ``[q1 - factor*IQR, q3 + factor*IQR]``.

    Quartiles use the same interpolation as :func:`percentile`.  ``factor``
    defaults to ``settings.statistics.outlier_factor``.
    """

    if factor is None:
        if settings is None:
            settings = Settings()
        factor = settings.statistics.outlier_factor
    arr = _as_series(data)
    srt = np.sort(arr)
    q1 = percentile(srt, 25)
    q3 = percentile(srt, 75)
    iqr = q3 - q1
    lower = q1 - factor * iqr
    upper = q3 + factor * iqr
    idx = np.nonzero((arr < lower) | (arr > upper))[0]
    return OutlierResult(
        outlier_indices=[int(i) for i in idx],
        outlier_values=[float(arr[i]) for i in idx],
        lower_bound=lower,
        upper_bound=upper,
    )


def normalize(data: Sequence[float]) -> np.ndarray:
    """Z-score ``(x - mean) / std``; zeros for constant data."""

    arr = _as_series(data)
    sd = float(np.std(arr))
    if sd == 0:
        return np.zeros(arr.size, dtype=float)
    return (arr - arr.mean()) / sd


def min_max_scale(data: Sequence[float], min_value: float = 0.0, max_value: float = 1.0) -> np.ndarray:
    """Map ``data`` linearly onto ``[min_value, max_value]``.

    Constant data maps to ``(min_value + max_value) / 2``.
    """

    arr = _as_series(data)
    lo, hi = float(np.min(arr)), float(np.max(arr))
    span = hi - lo
    if span == 0:
        return np.full(arr.size, (min_value + max_value) / 2.0)
    return min_value + (arr - lo) * (max_value - min_value) / span


__all__ = [
    "MIN_SAMPLES_KURTOSIS",
    "MIN_SAMPLES_SKEWNESS",
    "basic_statistics",
    "correlation",
    "detect_outliers",
    "exponential_moving_average",
    "histogram",
    "linear_regression",
    "min_max_scale",
    "mode",
    "moving_average",
    "normalize",
    "percentile",
]
