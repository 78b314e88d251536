"""Pairwise Pearson correlation matrix over the fixed correlation metrics."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .charts.insights import js_round
from .dto import CorrelationMatrix, EnrichedShot
from .fields import CORRELATION_KEYS


def pearson(pairs: Sequence[tuple[float, float]]) -> float:
    """Return the Pearson coefficient rounded to 3 decimals.

    Args:
        pairs: Paired-present `(a, b)` observations.

    Returns:
        r in [-1, 1]; 0 when there are no pairs or either variance is zero.
    """

    if not pairs:
        return 0.0
    mean_a = sum(a for a, _b in pairs) / len(pairs)
    mean_b = sum(b for _a, b in pairs) / len(pairs)
    numerator = 0.0
    denom_a = 0.0
    denom_b = 0.0
    for a, b in pairs:
        numerator += (a - mean_a) * (b - mean_b)
        denom_a += (a - mean_a) ** 2
        denom_b += (b - mean_b) ** 2
    if not denom_a or not denom_b:
        return 0.0
    return js_round(numerator / math.sqrt(denom_a * denom_b), 3)


def _pairs(shots: Sequence[EnrichedShot], key_a: str, key_b: str) -> list[tuple[float, float]]:
    pairs: list[tuple[float, float]] = []
    for shot in shots:
        a = shot.number(key_a)
        b = shot.number(key_b)
        if a is None or b is None:
            continue
        pairs.append((a, b))
    return pairs


def correlation_matrix(
    shots: Sequence[EnrichedShot],
    keys: Sequence[str] = CORRELATION_KEYS,
) -> CorrelationMatrix | None:
    """Build the correlation matrix for the keys present in any shot.

    Args:
        shots: Enriched shots.
        keys: Candidate metric keys in matrix order.

    Returns:
        CorrelationMatrix, or None when fewer than two variables are present.
    """

    variables = tuple(key for key in keys if any(shot.number(key) is not None for shot in shots))
    if len(variables) < 2:
        return None

    matrix = tuple(
        tuple(
            1.0 if row == col else pearson(_pairs(shots, row, col))
            for col in variables
        )
        for row in variables
    )
    return CorrelationMatrix(variables=variables, matrix=matrix)
