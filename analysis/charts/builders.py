"""Data shaping helpers shared by chart definitions."""

from __future__ import annotations

import math
from collections.abc import Sequence

from analysis.dto import EnrichedShot
from analysis.stats import median

from .insights import js_round, to_fixed
from .payloads import HistBin, ScatterPoint, TableCell

HISTOGRAM_BINS = 10
TABLE_COLUMNS: tuple[str, ...] = ("Groupe", "Count", "Min", "Median", "Max")


def scatter_points(shots: Sequence[EnrichedShot], x_key: str, y_key: str) -> tuple[ScatterPoint, ...]:
    """Pair two metrics per shot, dropping shots missing either value."""

    points: list[ScatterPoint] = []
    for shot in shots:
        x = shot.number(x_key)
        y = shot.number(y_key)
        if x is None or y is None:
            continue
        points.append(ScatterPoint(x=x, y=y, shot_index=shot.shot_index))
    return tuple(points)


def line_values(shots: Sequence[EnrichedShot], key: str) -> tuple[float, ...]:
    """Return present values in shot order."""

    return tuple(value for shot in shots if (value := shot.number(key)) is not None)


def histogram_bins(
    shots: Sequence[EnrichedShot],
    key: str,
    bins: int = HISTOGRAM_BINS,
) -> tuple[HistBin, ...]:
    """Bucket a metric into equal-width bins over [min, max].

    A zero range is widened to 1 so every value lands in the first bin.
    """

    values = line_values(shots, key)
    if not values:
        return ()
    low = min(values)
    span = (max(values) - low) or 1
    step = span / bins
    counts = [0] * bins
    for value in values:
        index = min(bins - 1, max(0, math.floor((value - low) / step)))
        counts[index] += 1

    result: list[HistBin] = []
    for index, count in enumerate(counts):
        start = low + step * index
        end = start + step
        result.append(HistBin(label=f"{to_fixed(start, 1)}-{to_fixed(end, 1)}", count=count))
    return tuple(result)


def min_median_max_rows(
    shots: Sequence[EnrichedShot],
    group_key: str,
    value_key: str,
) -> tuple[dict[str, TableCell], ...]:
    """Summarize a metric per group as Groupe/Count/Min/Median/Max rows."""

    groups: dict[str, list[float]] = {}
    for shot in shots:
        bucket = shot.label(group_key)
        value = shot.number(value_key)
        if bucket is None or value is None:
            continue
        groups.setdefault(bucket, []).append(value)

    rows: list[dict[str, TableCell]] = []
    for bucket, values in groups.items():
        ordered = sorted(values)
        rows.append(
            {
                "Groupe": bucket,
                "Count": len(ordered),
                "Min": js_round(ordered[0], 2),
                "Median": js_round(median(ordered) or 0.0, 2),
                "Max": js_round(ordered[-1], 2),
            }
        )
    return tuple(rows)
