import math

import numpy as np
import pytest

from sigscope.config import Settings
from sigscope.core import statistics


def test_basic_statistics():
    s = statistics.basic_statistics([1, 2, 3, 4, 5])
    assert s.mean == 3
    assert s.median == 3
    assert s.mode == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert s.variance == pytest.approx(2.0)
    assert s.standard_deviation == pytest.approx(math.sqrt(2.0))
    assert (s.min, s.max, s.range) == (1.0, 5.0, 4.0)
    assert s.count == 5
    assert s.sum == 15
    assert s.skewness == pytest.approx(0.0)
    assert s.kurtosis == pytest.approx(2.625)
    assert s.percentiles.p25 == 2.0
    assert s.percentiles.p50 == 3.0
    assert s.percentiles.p75 == 4.0
    assert s.percentiles.p90 == pytest.approx(4.6)
    assert s.percentiles.p99 == pytest.approx(4.96)


def test_even_median_and_mode():
    s = statistics.basic_statistics([4, 1, 3, 3])
    assert s.median == 3.0
    assert s.mode == [3.0]
    assert statistics.mode([2, 1, 2, 1, 5]) == [1.0, 2.0]


def test_skewness_sign():
    assert statistics.basic_statistics([1, 2, 2, 3, 10]).skewness > 0
    assert statistics.basic_statistics([-10, 1, 2, 2, 3]).skewness < 0


def test_small_samples():
    s = statistics.basic_statistics([1, 2])
    assert math.isnan(s.skewness)
    assert math.isnan(s.kurtosis)
    s = statistics.basic_statistics([1, 2, 4])
    assert not math.isnan(s.skewness)
    assert math.isnan(s.kurtosis)
    s = statistics.basic_statistics([7, 7, 7, 7])
    assert s.skewness == 0.0
    assert s.kurtosis == 0.0
    assert s.standard_deviation == 0.0


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        statistics.basic_statistics([])
    with pytest.raises(ValueError):
        statistics.histogram([])


def test_percentile():
    data = [10, 20, 30, 40]
    assert statistics.percentile(data, 0) == 10
    assert statistics.percentile(data, 100) == 40
    assert statistics.percentile(data, 50) == pytest.approx(25.0)
    with pytest.raises(ValueError):
        statistics.percentile(data, 101)


def test_histogram_equal_width():
    h = statistics.histogram([0, 1, 2, 3, 4], bins=4)
    np.testing.assert_array_equal(h.counts, [1, 1, 1, 2])
    np.testing.assert_allclose(h.bins, [0.5, 1.5, 2.5, 3.5])
    np.testing.assert_allclose(h.edges, [0, 1, 2, 3, 4])
    assert h.bin_width == 1.0
    assert h.total_count == 5
    assert h.counts.sum() == h.total_count


def test_histogram_default_bins_from_settings():
    settings = Settings()
    settings.statistics.histogram_bins = 3
    h = statistics.histogram(np.arange(9), settings=settings)
    np.testing.assert_array_equal(h.counts, [3, 3, 3])
    assert len(statistics.histogram(np.arange(100)).counts) == 10


def test_histogram_constant_data():
    h = statistics.histogram([5, 5, 5], bins=2)
    np.testing.assert_allclose(h.edges, [4.5, 5.0, 5.5])
    np.testing.assert_array_equal(h.counts, [0, 3])


def test_histogram_explicit_edges():
    h = statistics.histogram([-1, 0, 1, 2, 4, 5], bins=[4, 0, 2])
    np.testing.assert_allclose(h.edges, [0, 2, 4])
    np.testing.assert_array_equal(h.counts, [2, 2])
    assert h.total_count == 6
    assert h.bin_width == 0.0
    with pytest.raises(ValueError):
        statistics.histogram([1, 2], bins=[1])
    with pytest.raises(ValueError):
        statistics.histogram([1, 2], bins=0)


def test_linear_regression_exact():
    x = [1, 2, 3, 4]
    y = [3, 5, 7, 9]
    r = statistics.linear_regression(x, y)
    assert r.slope == pytest.approx(2.0)
    assert r.intercept == pytest.approx(1.0)
    assert r.r_squared == pytest.approx(1.0)
    assert r.correlation == pytest.approx(1.0)
    assert r.equation == "y = 2.0000x + 1.0000"
    np.testing.assert_allclose(r.predicted_values, y)
    np.testing.assert_allclose(r.residuals, 0.0, atol=1e-12)


def test_linear_regression_noisy():
    rng = np.random.default_rng(4)
    x = np.linspace(0, 10, 50)
    y = -0.5 * x + 2 + rng.normal(0, 0.1, x.size)
    r = statistics.linear_regression(x, y)
    slope, intercept = np.polyfit(x, y, 1)
    assert r.slope == pytest.approx(slope)
    assert r.intercept == pytest.approx(intercept)
    assert r.correlation < 0
    assert r.r_squared == pytest.approx(np.corrcoef(x, y)[0, 1] ** 2)


def test_linear_regression_rejects_bad_input():
    with pytest.raises(ValueError):
        statistics.linear_regression([1, 1, 1], [1, 2, 3])
    with pytest.raises(ValueError):
        statistics.linear_regression([1, 2], [1])
    with pytest.raises(ValueError):
        statistics.linear_regression([], [])


def test_correlation():
    assert statistics.correlation([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)
    assert statistics.correlation([1, 2, 3], [5, 5, 5]) == 0.0
    x = [1.0, 2.0, 4.0, 3.0]
    y = [2.0, 1.0, 5.0, 4.0]
    assert statistics.correlation(x, y) == pytest.approx(np.corrcoef(x, y)[0, 1])


def test_trailing_moving_average():
    np.testing.assert_allclose(statistics.moving_average([1, 2, 3, 4, 5], 2), [1.5, 2.5, 3.5, 4.5])
    with pytest.raises(ValueError):
        statistics.moving_average([1, 2], 3)
    with pytest.raises(ValueError):
        statistics.moving_average([1, 2], 0)


def test_exponential_moving_average():
    np.testing.assert_allclose(statistics.exponential_moving_average([0, 2, 4], 0.5), [0, 1, 2.5])
    np.testing.assert_allclose(statistics.exponential_moving_average([10, 0]), [10, 9])
    np.testing.assert_allclose(statistics.exponential_moving_average([1, 5, 2], 1.0), [1, 5, 2])
    with pytest.raises(ValueError):
        statistics.exponential_moving_average([1, 2], 0.0)


def test_detect_outliers():
    r = statistics.detect_outliers([1, 100, 2, 3, 4, 5])
    assert r.outlier_indices == [1]
    assert r.outlier_values == [100.0]
    assert r.lower_bound == pytest.approx(-1.5)
    assert r.upper_bound == pytest.approx(8.5)
    assert statistics.detect_outliers([1, 2, 3, 4]).outlier_indices == []


def test_detect_outliers_factor_from_settings():
    settings = Settings()
    settings.statistics.outlier_factor = 0.0
    r = statistics.detect_outliers([1, 2, 3, 4, 5], settings=settings)
    assert r.outlier_indices == [0, 4]


def test_normalize():
    out = statistics.normalize([1, 2, 3])
    np.testing.assert_allclose(out, [-math.sqrt(1.5), 0.0, math.sqrt(1.5)])
    assert out.mean() == pytest.approx(0.0)
    assert np.std(out) == pytest.approx(1.0)
    np.testing.assert_array_equal(statistics.normalize([2, 2]), [0.0, 0.0])


def test_min_max_scale():
    np.testing.assert_allclose(statistics.min_max_scale([0, 5, 10]), [0, 0.5, 1])
    np.testing.assert_allclose(statistics.min_max_scale([0, 5, 10], -1, 1), [-1, 0, 1])
    np.testing.assert_allclose(statistics.min_max_scale([3, 3], 0, 4), [2, 2])
    np.testing.assert_allclose(statistics.min_max_scale([0, 10], min_value=-1, max_value=1), [-1, 1])


@pytest.mark.parametrize("bins", [1, 2, 7, 10, 64, 1000, 10007])
@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_histogram_counts_every_sample(bins, seed):
    rng = np.random.default_rng(seed)
    data = rng.normal(rng.uniform(-100, 100), rng.uniform(0.01, 50), rng.integers(2, 500))
    h = statistics.histogram(data, bins=bins)
    assert h.counts.sum() == h.total_count == data.size
    assert len(h.counts) == bins
    assert h.edges[0] == data.min()
    assert h.edges[-1] == data.max()


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_histogram_rejects_non_finite(bad):
    with pytest.raises(ValueError):
        statistics.histogram([1.0, bad, 2.0], bins=2)


def test_linear_regression_reference_case():
    r = statistics.linear_regression([0, 1, 2, 3], [5, 7, 9, 11])
    assert r.slope == pytest.approx(2.0)
    assert r.intercept == pytest.approx(5.0)
    assert r.r_squared == pytest.approx(1.0)


def test_detect_outliers_reference_case():
    r = statistics.detect_outliers([1, 2, 3, 4, 5, 100])
    assert r.outlier_indices == [5]
    assert r.outlier_values == [100.0]
