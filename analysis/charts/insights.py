"""Short French chart captions and number formatting.

Captions are derived from payload data only. Numbers follow the report
conventions: `to_fixed` keeps trailing zeros (used for r and R2), while
`format_value` drops them ("12.0 m" renders as "12 m").
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from .payloads import (
    ChartPayload,
    HistPayload,
    LinePayload,
    MatrixPayload,
    ModelPayload,
    ScatterPayload,
    TablePayload,
)

MIN_SCATTER_POINTS = 6


def to_fixed(value: float, digits: int) -> str:
    """Render `value` with exactly `digits` decimals, ties away from zero."""

    quantum = Decimal(1).scaleb(-digits)
    if value == 0:
        value = 0.0  # -0.0 renders as "0"
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def js_round(value: float, digits: int) -> float:
    """Round like `to_fixed` but return a number."""

    return float(to_fixed(value, digits))


def number_text(value: float) -> str:
    """Render a number without a trailing ".0"."""

    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def format_value(value: float | None, unit: str | None = None, digits: int = 1) -> str | None:
    """Round and render a value with an optional unit suffix.

    Args:
        value: Value to render.
        unit: Optional unit appended after a space.
        digits: Decimal places kept before trailing zeros are dropped.

    Returns:
        Rendered text, or None for missing or non-finite values.
    """

    if value is None or not math.isfinite(value):
        return None
    rendered = number_text(js_round(value, digits))
    return f"{rendered} {unit}" if unit else rendered


def pearson_r(points: list[tuple[float, float]]) -> float | None:
    """Unrounded Pearson r, or None below 6 points or without variance."""

    if len(points) < MIN_SCATTER_POINTS:
        return None
    mean_x = sum(x for x, _y in points) / len(points)
    mean_y = sum(y for _x, y in points) / len(points)
    numerator = 0.0
    denom_x = 0.0
    denom_y = 0.0
    for x, y in points:
        numerator += (x - mean_x) * (y - mean_y)
        denom_x += (x - mean_x) ** 2
        denom_y += (y - mean_y) ** 2
    if not denom_x or not denom_y:
        return None
    return numerator / math.sqrt(denom_x * denom_y)


def _strength(r: float) -> str:
    magnitude = abs(r)
    if magnitude < 0.2:
        return "faible"
    if magnitude < 0.5:
        return "moderee"
    if magnitude < 0.7:
        return "marquee"
    return "forte"


def _mean_std(values: list[float]) -> tuple[float, float]:
    avg = sum(values) / len(values)
    return avg, math.sqrt(sum((value - avg) ** 2 for value in values) / len(values))


def _scatter_insight(payload: ScatterPayload) -> str | None:
    if len(payload.points) < MIN_SCATTER_POINTS:
        return None
    xs = [point.x for point in payload.points]
    ys = [point.y for point in payload.points]
    r = pearson_r(list(zip(xs, ys)))
    mean_x, std_x = _mean_std(xs)
    mean_y, std_y = _mean_std(ys)

    relation = None
    if r is not None:
        direction = "positive" if r >= 0 else "negative"
        relation = f"Relation {_strength(r)} {direction} (r={to_fixed(r, 2)})."
    stats = " · ".join(
        [
            f"{payload.x_label} moy. {format_value(mean_x, payload.x_unit)}",
            f"ET {format_value(std_x, payload.x_unit)}",
            f"{payload.y_label} moy. {format_value(mean_y, payload.y_unit)}",
            f"ET {format_value(std_y, payload.y_unit)}",
        ]
    )
    return " ".join(part for part in (relation, stats) if part)


def _line_insight(payload: LinePayload) -> str | None:
    if not payload.series or not payload.series[0].values:
        return None
    values = payload.series[0].values
    delta = values[-1] - values[0]
    span = max(values) - min(values)
    if abs(delta) < max(span * 0.15, 0.01):
        trend = "stable"
    else:
        trend = "en hausse" if delta > 0 else "en baisse"
    return (
        f"Amplitude {format_value(span, payload.y_unit)} · "
        f"Tendance {trend} (Δ {format_value(delta, payload.y_unit)})."
    )


def _hist_insight(payload: HistPayload) -> str | None:
    total = sum(bin_.count for bin_ in payload.bins)
    if not total:
        return None
    top = payload.bins[0]
    for bin_ in payload.bins[1:]:
        if bin_.count > top.count:
            top = bin_
    share = math.floor(top.count / total * 100 + 0.5)
    unit = f" {payload.x_unit}" if payload.x_unit else ""
    return f"Zone dominante {top.label}{unit} ({share}% des coups)."


def _table_insight(payload: TablePayload) -> str | None:
    if not payload.rows:
        return None
    metric = None
    for needle in ("median", "mean", "max"):
        metric = next((column for column in payload.columns if needle in column.lower()), None)
        if metric is not None:
            break
    if metric is None:
        return None

    best = None
    best_value = 0.0
    for row in payload.rows:
        value = row.get(metric)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            continue
        if best is None or value > best_value:
            best, best_value = row, float(value)
    if best is None:
        return None
    label = best.get("Groupe") or "Groupe"
    return f"{label}: {metric} {number_text(best_value)}."


def _matrix_insight(payload: MatrixPayload) -> str | None:
    if len(payload.variables) < 2:
        return None
    best: tuple[int, int, float] | None = None
    for i, row in enumerate(payload.matrix):
        for j, value in enumerate(row):
            if i == j:
                continue
            if best is None or abs(value) > abs(best[2]):
                best = (i, j, value)
    if best is None:
        return None
    i, j, value = best
    return (
        f"Correlation la plus forte: {payload.variables[i]} vs {payload.variables[j]} "
        f"(r={to_fixed(value, 2)})."
    )


def _model_insight(payload: ModelPayload) -> str | None:
    model = payload.model
    if not model.n:
        return None
    r2 = to_fixed(model.r2, 2)
    if not model.coefficients:
        return f"R2 {r2}."
    items = list(model.coefficients.items())
    top = items[0]
    for item in items[1:]:
        if abs(item[1]) > abs(top[1]):
            top = item
    return f"R2 {r2} - facteur dominant: {top[0]} ({to_fixed(top[1], 2)})."


def build_insight(payload: ChartPayload) -> str | None:
    """Return an automatic caption for a payload, or None when not meaningful."""

    if isinstance(payload, ScatterPayload):
        return _scatter_insight(payload)
    if isinstance(payload, LinePayload):
        return _line_insight(payload)
    if isinstance(payload, HistPayload):
        return _hist_insight(payload)
    if isinstance(payload, TablePayload):
        return _table_insight(payload)
    if isinstance(payload, MatrixPayload):
        return _matrix_insight(payload)
    return _model_insight(payload)


_HISTOGRAM_RE = re.compile(r"histogramme", re.IGNORECASE)
_OVER_TIME_RE = re.compile(r"dans le temps", re.IGNORECASE)
_VS_RE = re.compile(r"vs", re.IGNORECASE)


def auto_description(title: str) -> str:
    """Derive a one-line chart description from its title."""

    lower = title.lower()
    if "histogramme" in lower:
        return f"Distribution des coups pour {_HISTOGRAM_RE.sub('', title, count=1).strip()}."
    if "dans le temps" in lower:
        return f"Evolution de {_OVER_TIME_RE.sub('', title, count=1).strip()} sur la serie."
    if "matrice" in lower:
        return "Relation entre variables (correlations)."
    if "modele" in lower:
        return "Impact des variables sur la metrique cible."
    if " vs " in lower:
        parts = [part.strip() for part in _VS_RE.split(title)]
        if len(parts) == 2:
            return f"Relation entre {parts[0]} et {parts[1]}."
    return f"Analyse de {lower}."
