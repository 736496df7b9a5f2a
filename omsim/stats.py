from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Iterable
import math
import numpy as np

# Sums below are accumulated left to right (``np.cumsum``) rather than with
# numpy's pairwise reduction so results match the legacy simulation runs to
# the last bit.


def _as_array(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError("Expected a one-dimensional sequence of samples")
    return arr


def _sequential_sum(arr: np.ndarray) -> float:
    if arr.size == 0:
        return 0.0
    return float(np.cumsum(arr)[-1])


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean."""
    arr = _as_array(values)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(_sequential_sum(arr)) / arr.size)


def stddev(values: Iterable[float], am: float) -> float:
    """Sample standard deviation around ``am`` (denominator ``n - 1``).

    A single sample yields NaN instead of raising.
    """
    arr = _as_array(values)
    sq = (arr - am) * (arr - am)
    with np.errstate(divide="ignore", invalid="ignore"):
        var = np.float64(_sequential_sum(sq)) / np.float64(arr.size - 1.0)
        return float(np.sqrt(var))


def coefficient_of_variation(am: float, sd: float) -> float:
    """Coefficient of variation ``sd / am``; a zero mean gives Inf/NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(sd) / np.float64(am))


def log_values(values: Iterable[float]) -> np.ndarray:
    """Natural log of each sample; non-positive samples map to 0.0."""
    arr = _as_array(values)
    out = np.zeros_like(arr)
    pos = arr > 0
    out[pos] = np.log(arr[pos])
    return out


def geometric_mean(values: Iterable[float]) -> float:
    """Geometric mean ``exp(sum(ln v for v > 0) / n)``.

    ``n`` is the full sample count: non-positive samples add nothing to the
    log sum but still count in the denominator.  Legacy results depend on
    this, so it must not be changed to the positive count.
    """
    arr = _as_array(values)
    logs = np.log(arr[arr > 0])
    with np.errstate(divide="ignore", invalid="ignore"):
        gm = np.float64(_sequential_sum(logs)) / arr.size
        return float(np.exp(gm))


def geometric_stddev(values: Iterable[float], gm: float) -> float:
    """Geometric standard deviation around the geometric mean ``gm``.

    Only positive samples contribute (and nothing does if ``gm <= 0``), while
    the denominator stays ``n - 1`` over all samples.
    """
    arr = _as_array(values)
    if gm > 0:
        d = np.log(arr[arr > 0]) - math.log(gm)
        acc = _sequential_sum(d * d)
    else:
        acc = 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        gsd = np.float64(acc) / np.float64(arr.size - 1)
        return float(np.exp(np.sqrt(gsd)))


def quantile_index(n: int, p: float) -> int:
    """Index of the ``p``-th quantile in an ascending array of length ``n``.

    Lower quantiles (``p < 50``) use ``int((n/100)*p) - 1``; the median and
    upper quantiles use ``int(n - (n/100)*(100-p)) - 1``.  Both truncate
    toward zero.  For ``n=144``: q5 -> 6, q50 -> 71, q95 -> 135.
    """
    if not 0 < p < 100:
        raise ValueError(f"quantile p must be in (0, 100), got {p}")
    if p < 50:
        x = (float(n) / 100.0) * p
    else:
        x = float(n) - ((float(n) / 100.0) * (100.0 - p))
    i = int(x) - 1
    if i < 0 or i >= n:
        raise ValueError(f"{n} samples are too few for quantile {p}")
    return i


def quantile(sorted_values: Iterable[float], p: float) -> float:
    """Rank-based quantile lookup into ``sorted_values`` (ascending)."""
    arr = _as_array(sorted_values)
    return float(arr[quantile_index(arr.size, p)])


def quantile_deviation(q5: float, q95: float) -> float:
    return (q95 - q5) / 2.0


def relative_quantile_deviation(q5: float, q50: float, q95: float) -> float:
    """``(q95 - q5) / (2 * q50)``; a zero median gives Inf/NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(q95 - q5) / np.float64(2.0 * q50))


def minimum(values: Iterable[float]) -> float:
    return float(np.min(_as_array(values)))


def maximum(values: Iterable[float]) -> float:
    return float(np.max(_as_array(values)))


def value_range(values: Iterable[float]) -> float:
    return maximum(values) - minimum(values)


def factorial(n: int) -> int:
    """Iterative ``n!``; returns 1 for ``n <= 1``."""
    f = 1
    if n > 1:
        for i in range(1, n + 1):
            f *= i
    return f


@dataclass(frozen=True)
class SampleStatistics:
    """Descriptive statistics of one sample population (rooms or cellar)."""

    average: float
    maximum: float
    minimum: float
    deviation: float
    var_coefficient: float
    range: float
    quantile05: float
    quantile95: float
    median: float
    quantile_deviation: float
    relative_quantile_deviation: float
    log_average: float
    log_deviation: float

    def to_dict(self) -> dict:
        return asdict(self)


def describe(sorted_values: Iterable[float]) -> SampleStatistics:
    """Compute every :class:`SampleStatistics` field for an ascending sample.

    Extremes are taken from the ends of the sorted array, quantiles by rank,
    so the input must already be sorted.
    """
    arr = _as_array(sorted_values)
    if arr.size == 0:
        raise ValueError("Cannot describe an empty sample")
    am = mean(arr)
    hi = float(arr[-1])
    lo = float(arr[0])
    sd = stddev(arr, am)
    q05 = quantile(arr, 5)
    q95 = quantile(arr, 95)
    q50 = quantile(arr, 50)
    gm = geometric_mean(arr)
    return SampleStatistics(
        average=am,
        maximum=hi,
        minimum=lo,
        deviation=sd,
        var_coefficient=coefficient_of_variation(am, sd),
        range=hi - lo,
        quantile05=q05,
        quantile95=q95,
        median=q50,
        quantile_deviation=quantile_deviation(q05, q95),
        relative_quantile_deviation=relative_quantile_deviation(q05, q50, q95),
        log_average=gm,
        log_deviation=geometric_stddev(arr, gm),
    )
