import math

import numpy as np
import pytest

from omsim.stats import (
    mean,
    stddev,
    coefficient_of_variation,
    geometric_mean,
    geometric_stddev,
    quantile,
    quantile_index,
    quantile_deviation,
    relative_quantile_deviation,
    value_range,
    factorial,
    log_values,
    describe,
)


def test_mean_and_sample_stddev():
    x = np.arange(1.0, 145.0)
    am = mean(x)
    assert am == 72.5
    # sample SD of 1..n is sqrt(n(n+1)/12)
    assert stddev(x, am) == pytest.approx(math.sqrt(144 * 145 / 12))
    assert coefficient_of_variation(am, stddev(x, am)) == pytest.approx(math.sqrt(1740) / 72.5)


def test_quantile_indices_144():
    assert quantile_index(144, 5) == 6
    assert quantile_index(144, 50) == 71
    assert quantile_index(144, 95) == 135


def test_quantile_indices_24():
    assert quantile_index(24, 5) == 0
    assert quantile_index(24, 50) == 11
    assert quantile_index(24, 95) == 21


def test_quantile_fixture_144():
    x = np.arange(1.0, 145.0)
    assert quantile(x, 5) == 7.0
    assert quantile(x, 50) == 72.0
    assert quantile(x, 95) == 136.0
    assert quantile_deviation(7.0, 136.0) == 64.5
    assert relative_quantile_deviation(7.0, 72.0, 136.0) == pytest.approx(129.0 / 144.0)


def test_quantile_too_few_samples():
    with pytest.raises(ValueError):
        quantile(np.arange(10.0), 5)


def test_geometric_mean_counts_nonpositive_in_denominator():
    x = np.array([0.0, 0.0] + [math.e] * 8)
    gm = geometric_mean(x)
    assert gm == pytest.approx(math.exp(8.0 / 10.0))
    # positive-only mean would be e
    assert not np.isclose(gm, math.e)


def test_geometric_stddev_skips_nonpositive_but_uses_full_n():
    x = np.array([0.0, 0.0] + [math.e] * 8)
    gm = math.exp(0.8)
    expected = math.exp(math.sqrt(8 * (1.0 - 0.8) ** 2 / 9))
    assert geometric_stddev(x, gm) == pytest.approx(expected)


def test_geometric_of_constant_sample():
    x = np.full(24, 100.0)
    gm = geometric_mean(x)
    assert gm == pytest.approx(100.0)
    assert geometric_stddev(x, gm) == pytest.approx(1.0)


def test_log_values_zero_for_nonpositive():
    out = log_values([-1.0, 0.0, 1.0, math.e])
    assert np.allclose(out, [0.0, 0.0, 0.0, 1.0])


def test_degenerate_arithmetic_is_not_raised():
    # single sample: n-1 == 0
    assert math.isnan(stddev([5.0], 5.0))
    assert math.isinf(relative_quantile_deviation(1.0, 0.0, 3.0))
    assert math.isinf(coefficient_of_variation(0.0, 2.0))
    assert math.isnan(coefficient_of_variation(0.0, 0.0))


def test_range_and_factorial():
    assert value_range([3.0, -2.0, 7.5]) == 9.5
    assert factorial(0) == 1
    assert factorial(1) == 1
    assert factorial(-4) == 1
    assert factorial(5) == 120
    assert factorial(7) == 5040


def test_describe_fixture():
    s = describe(np.arange(1.0, 145.0))
    assert s.average == 72.5
    assert s.minimum == 1.0
    assert s.maximum == 144.0
    assert s.range == 143.0
    assert s.quantile05 == 7.0
    assert s.quantile95 == 136.0
    assert s.median == 72.0
    assert s.quantile_deviation == 64.5
    assert s.relative_quantile_deviation == pytest.approx(129.0 / 144.0)
    assert s.var_coefficient == pytest.approx(s.deviation / s.average)
    assert s.log_average == pytest.approx(math.exp(np.log(np.arange(1.0, 145.0)).mean()))
    assert set(s.to_dict()) >= {"average", "log_deviation", "median"}


def test_describe_rejects_empty():
    with pytest.raises(ValueError):
        describe([])
