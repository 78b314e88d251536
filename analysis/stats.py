"""Descriptive statistics helpers for the Analysis Engine.

Every helper accepts plain float sequences and returns None instead of
raising when there is nothing to summarize.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .charts.insights import js_round
from .dto import SummaryStat

IQR_MULTIPLIER = 1.5


def mean(values: Sequence[float]) -> float | None:
    """Return the arithmetic mean, or None for an empty sequence."""

    if not values:
        return None
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float | None:
    """Return the population standard deviation (divides by n)."""

    avg = mean(values)
    if avg is None:
        return None
    variance = sum((value - avg) ** 2 for value in values) / len(values)
    return math.sqrt(variance)


def median(values: Sequence[float]) -> float | None:
    """Return the median using the even/odd split average."""

    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def percentile(values: Sequence[float], p: float) -> float | None:
    """Return the linear-interpolated percentile.

    Args:
        values: Sample values (any order).
        p: Fraction in [0, 1].

    Returns:
        The interpolated value at rank `(n - 1) * p`, or None when empty.
    """

    if not values:
        return None
    ordered = sorted(values)
    idx = (len(ordered) - 1) * p
    lower = math.floor(idx)
    upper = math.ceil(idx)
    if lower == upper:
        return ordered[lower]
    weight = idx - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def iqr_fences(values: Sequence[float]) -> tuple[float, float] | None:
    """Return `(Q1 - 1.5*IQR, Q3 + 1.5*IQR)`, or None when empty."""

    q1 = percentile(values, 0.25)
    q3 = percentile(values, 0.75)
    if q1 is None or q3 is None:
        return None
    iqr = q3 - q1
    return q1 - IQR_MULTIPLIER * iqr, q3 + IQR_MULTIPLIER * iqr


def summary_stats(values: Sequence[float]) -> SummaryStat:
    """Summarize a metric.

    Args:
        values: Present (finite) values for one metric.

    Returns:
        SummaryStat; all statistics are None when `values` is empty.
    """

    count = len(values)
    if count == 0:
        return SummaryStat(count=0)
    avg = sum(values) / count
    std = math.sqrt(sum((value - avg) ** 2 for value in values) / count)
    return SummaryStat(
        count=count,
        mean=avg,
        std=std,
        cv=abs(std / avg * 100) if avg else None,
        median=median(values),
        p10=percentile(values, 0.1),
        p90=percentile(values, 0.9),
    )


def corridor_percent(values: Sequence[float], threshold: float) -> float | None:
    """Return the share (%) of values with `|value| <= threshold`.

    Args:
        values: Signed deviations (lateral or distance from target).
        threshold: Half-width of the corridor.

    Returns:
        Percentage rounded to 1 decimal, or None when `values` is empty.
    """

    if not values:
        return None
    inside = sum(1 for value in values if abs(value) <= threshold)
    return js_round(inside / len(values) * 100, 1)
