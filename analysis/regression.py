"""Ordinary least squares regression via the normal equations.

The system `XᵗX β = Xᵗy` is solved with Gauss-Jordan elimination using
partial pivoting. Models that do not have enough complete rows, or whose
normal matrix is singular, are omitted rather than raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Final

from .dto import EnrichedShot, RadarModels, RegressionModel

logger = logging.getLogger(__name__)

PIVOT_TOLERANCE: Final[float] = 1e-8
MIN_REGRESSION_ROWS: Final[int] = 8

DISTANCE_MODEL_FEATURES: Final[tuple[str, ...]] = ("ball_speed", "launch_v", "spin_rpm")
LATERAL_MODEL_FEATURES: Final[tuple[str, ...]] = ("launch_h", "ftp", "spin_axis", "impact_lat")


def solve_linear(matrix: Sequence[Sequence[float]], vector: Sequence[float]) -> list[float] | None:
    """Solve a square linear system.

    Args:
        matrix: Square coefficient matrix (not modified).
        vector: Right-hand side.

    Returns:
        Solution vector, or None when a pivot stays below the tolerance.
    """

    n = len(matrix)
    augmented = [list(row) + [vector[i]] for i, row in enumerate(matrix)]
    for i in range(n):
        pivot_row = max(range(i, n), key=lambda r: abs(augmented[r][i]))
        if pivot_row != i:
            augmented[i], augmented[pivot_row] = augmented[pivot_row], augmented[i]
        pivot = augmented[i][i]
        if abs(pivot) < PIVOT_TOLERANCE:
            return None
        for j in range(i, n + 1):
            augmented[i][j] /= pivot
        for k in range(n):
            if k == i:
                continue
            factor = augmented[k][i]
            if not factor:
                continue
            for j in range(i, n + 1):
                augmented[k][j] -= factor * augmented[i][j]
    return [row[n] for row in augmented]


def _complete_rows(
    shots: Sequence[EnrichedShot],
    target: str,
    features: Sequence[str],
) -> list[tuple[float, list[float]]]:
    rows: list[tuple[float, list[float]]] = []
    for shot in shots:
        y = shot.number(target)
        xs = [shot.number(key) for key in features]
        if y is None or any(x is None for x in xs):
            continue
        rows.append((y, [float(x) for x in xs if x is not None]))
    return rows


def fit_linear_regression(
    shots: Sequence[EnrichedShot],
    target: str,
    features: Sequence[str],
) -> RegressionModel | None:
    """Fit `target ~ intercept + features` on complete rows.

    Args:
        shots: Enriched shots.
        target: Metric key to predict.
        features: Feature keys in design-matrix order.

    Returns:
        RegressionModel, or None with fewer than `max(8, len(features) + 2)`
        complete rows or a singular system.
    """

    rows = _complete_rows(shots, target, features)
    if len(rows) < max(MIN_REGRESSION_ROWS, len(features) + 2):
        return None

    k = len(features) + 1
    xtx = [[0.0] * k for _ in range(k)]
    xty = [0.0] * k
    for y, xs in rows:
        x = [1.0, *xs]
        for i in range(k):
            xty[i] += x[i] * y
            for j in range(k):
                xtx[i][j] += x[i] * x[j]

    coeffs = solve_linear(xtx, xty)
    if coeffs is None:
        return None
    intercept, betas = coeffs[0], coeffs[1:]

    y_mean = sum(y for y, _xs in rows) / len(rows)
    ss_tot = 0.0
    ss_res = 0.0
    for y, xs in rows:
        prediction = intercept + sum(value * beta for value, beta in zip(xs, betas))
        ss_tot += (y - y_mean) ** 2
        ss_res += (y - prediction) ** 2

    return RegressionModel(
        name=target,
        coefficients=dict(zip(features, betas)),
        intercept=intercept,
        r2=1 - ss_res / ss_tot if ss_tot else 0.0,
        n=len(rows),
        features=tuple(features),
    )


def fit_standing_models(shots: Sequence[EnrichedShot]) -> RadarModels:
    """Fit the carry-distance and lateral models."""

    distance = fit_linear_regression(shots, "carry", DISTANCE_MODEL_FEATURES)
    lateral = fit_linear_regression(shots, "lateral", LATERAL_MODEL_FEATURES)
    if distance is None:
        logger.debug("Distance regression omitted (insufficient or singular data).")
    if lateral is None:
        logger.debug("Lateral regression omitted (insufficient or singular data).")
    return RadarModels(regression_distance=distance, regression_lateral=lateral)
