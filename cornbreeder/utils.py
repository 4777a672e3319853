"""Small statistical helpers shared by the engine modules."""

from __future__ import annotations

import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("mean requires at least one value")
    return sum(values) / len(values)


def variance(values: Sequence[float], *, ddof: int = 0) -> float:
    if len(values) <= ddof:
        raise ValueError("variance requires more values than degrees of freedom")
    mu = mean(values)
    return sum((x - mu) ** 2 for x in values) / (len(values) - ddof)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    if len(x) != len(y):
        raise ValueError("Sequences must be of equal length")
    if len(x) < 2:
        return float("nan")
    mean_x = mean(x)
    mean_y = mean(y)
    num = sum((a - mean_x) * (b - mean_y) for a, b in zip(x, y))
    den_x = math.sqrt(sum((a - mean_x) ** 2 for a in x))
    den_y = math.sqrt(sum((b - mean_y) ** 2 for b in y))
    if den_x == 0 or den_y == 0:
        return float("nan")
    return num / (den_x * den_y)


def check_variance(value: float, name: str = "Environmental variance") -> float:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be finite and non-negative, got {value!r}")
    return value
