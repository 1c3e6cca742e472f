"""Numeric primitives shared by the card computations.

Every helper is total: empty or degenerate input returns ``0`` rather than
raising or producing ``nan``.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, ``0`` for an empty sequence."""

    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Median of ``values`` computed on a sorted copy."""

    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return float(ordered[mid])


def standard_deviation(values: Sequence[float], precomputed_mean: Optional[float] = None) -> float:
    """Population standard deviation (divides by ``N``)."""

    if len(values) < 2:
        return 0.0
    avg = mean(values) if precomputed_mean is None else precomputed_mean
    variance = math.fsum((value - avg) ** 2 for value in values) / len(values)
    return math.sqrt(variance)


def linear_regression_slope(values: Sequence[float]) -> float:
    """Least-squares slope of ``values[i]`` against the index ``i``.

    Callers pass values oldest first. Fewer than two points, or no spread in
    the index, yields ``0``.
    """

    n = len(values)
    if n < 2:
        return 0.0

    x_mean = (n - 1) / 2.0
    y_mean = mean(values)
    numerator = 0.0
    denominator = 0.0
    for index, value in enumerate(values):
        x_diff = index - x_mean
        numerator += x_diff * (value - y_mean)
        denominator += x_diff * x_diff

    if denominator == 0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties away from zero for positive values (``2.5 -> 3``)."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def rate(count: int, total: int) -> float:
    """``count / total`` with ``0`` for an empty denominator."""

    if total <= 0:
        return 0.0
    return count / total
