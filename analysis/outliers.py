"""Outlier detection and shot rankings.

Two detectors are available:
- `iqr`: Tukey fences at Q1 - 1.5*IQR / Q3 + 1.5*IQR (linear-interpolated
  percentiles).
- `zrobust`: modified z-score `0.6745 * (x - median) / MAD` beyond 3.5.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from .dto import EnrichedShot, OutlierResult
from .stats import iqr_fences, median

ROBUST_Z_SCALE = 0.6745
ROBUST_Z_LIMIT = 3.5
WORST_SHARE = 0.10
TOP_STRIKE_SHARE = 0.20

OutlierTest = Callable[[float], bool]


def _entries(shots: Sequence[EnrichedShot], key: str) -> list[tuple[EnrichedShot, float]]:
    """Pair each shot with its present value for `key`."""

    return [(shot, value) for shot in shots if (value := shot.number(key)) is not None]


def iqr_test(values: Sequence[float]) -> OutlierTest | None:
    """Build an IQR fence predicate, or None when there are no values."""

    fences = iqr_fences(values)
    if fences is None:
        return None
    lower, upper = fences
    return lambda value: value < lower or value > upper


def robust_z_test(values: Sequence[float]) -> OutlierTest | None:
    """Build a median/MAD modified z-score predicate.

    Returns None when there are no values. A zero MAD flags nothing.
    """

    center = median(values)
    if center is None:
        return None
    mad = median([abs(value - center) for value in values])
    if not mad:
        return lambda value: False
    return lambda value: abs(ROBUST_Z_SCALE * (value - center) / mad) > ROBUST_Z_LIMIT


def _rank_desc(entries: list[tuple[int, float]], share: float) -> tuple[int, ...]:
    """Return shot indices of the top `ceil(share * n)` entries (at least 1)."""

    if not entries:
        return ()
    ordered = sorted(entries, key=lambda entry: -entry[1])
    # Rounding keeps float noise (30 * 0.1 == 3.0000000000000004) out of ceil.
    count = max(1, math.ceil(round(len(entries) * share, 9)))
    return tuple(index for index, _metric in ordered[:count])


def compute_outliers(
    shots: Sequence[EnrichedShot],
    metric_keys: Sequence[str],
    *,
    method: str = "iqr",
) -> OutlierResult:
    """Flag outlier shots per metric and rank the worst/best shots.

    Args:
        shots: Enriched shots in source order.
        metric_keys: Metric keys to check.
        method: "iqr" or "zrobust"; anything else falls back to "iqr".

    Returns:
        OutlierResult. Metrics without values produce empty lists.
    """

    if method not in ("iqr", "zrobust"):
        method = "iqr"
    build_test = robust_z_test if method == "zrobust" else iqr_test

    by_metric: dict[str, tuple[int, ...]] = {}
    flags: dict[str, list[str]] = {}
    for key in metric_keys:
        entries = _entries(shots, key)
        is_outlier = build_test([value for _shot, value in entries])
        if is_outlier is None:
            by_metric[key] = ()
            continue
        flagged: list[int] = []
        for shot, value in entries:
            if not is_outlier(value):
                continue
            flagged.append(shot.shot_index)
            flags.setdefault(str(shot.shot_index), []).append(key)
        by_metric[key] = tuple(flagged)

    distance = [(shot.shot_index, abs(value)) for shot, value in _entries(shots, "distance_from_target")]
    dispersion = [(shot.shot_index, abs(value)) for shot, value in _entries(shots, "radial_miss")]
    strikes = [(shot.shot_index, value) for shot, value in _entries(shots, "strike_score")]

    return OutlierResult(
        method=method,
        by_metric=by_metric,
        flags={index: tuple(metrics) for index, metrics in flags.items()},
        worst10_distance=_rank_desc(distance, WORST_SHARE),
        worst10_dispersion=_rank_desc(dispersion, WORST_SHARE),
        top20_strikes=_rank_desc(strikes, TOP_STRIKE_SHARE),
    )
