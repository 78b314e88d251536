"""Chart payload DTOs.

Each payload variant carries a `type` tag so renderers can dispatch without
isinstance checks once the artifact is serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from analysis.dto import RegressionModel

TableCell = str | int | float | None


@dataclass(frozen=True)
class ScatterPoint:
    """One scatter point tagged with its source shot."""

    x: float
    y: float
    shot_index: int | None = None


@dataclass(frozen=True)
class ScatterPayload:
    """Two-metric scatter plot."""

    title: str
    x_label: str
    y_label: str
    points: tuple[ScatterPoint, ...] = ()
    x_unit: str | None = None
    y_unit: str | None = None
    notes: str | None = None
    insight: str | None = None
    type: Literal["scatter"] = "scatter"


@dataclass(frozen=True)
class LineSeries:
    """A labeled sequence of values in shot order."""

    label: str
    values: tuple[float, ...] = ()


@dataclass(frozen=True)
class LinePayload:
    """Metric-over-time line chart (x is the shot sequence)."""

    title: str
    x_label: str
    y_label: str
    series: tuple[LineSeries, ...] = ()
    y_unit: str | None = None
    notes: str | None = None
    insight: str | None = None
    type: Literal["line"] = "line"


@dataclass(frozen=True)
class HistBin:
    """One histogram bucket."""

    label: str
    count: int


@dataclass(frozen=True)
class HistPayload:
    """Equal-width histogram."""

    title: str
    x_label: str
    y_label: str
    bins: tuple[HistBin, ...] = ()
    x_unit: str | None = None
    notes: str | None = None
    insight: str | None = None
    type: Literal["hist"] = "hist"


@dataclass(frozen=True)
class TablePayload:
    """Small grouped table (rows keyed by column name)."""

    title: str
    columns: tuple[str, ...] = ()
    rows: tuple[dict[str, TableCell], ...] = ()
    notes: str | None = None
    insight: str | None = None
    type: Literal["table"] = "table"


@dataclass(frozen=True)
class MatrixPayload:
    """Correlation heatmap."""

    title: str
    variables: tuple[str, ...] = ()
    matrix: tuple[tuple[float, ...], ...] = ()
    notes: str | None = None
    insight: str | None = None
    type: Literal["matrix"] = "matrix"


@dataclass(frozen=True)
class ModelPayload:
    """Regression coefficients view."""

    title: str
    model: RegressionModel
    notes: str | None = None
    insight: str | None = None
    type: Literal["model"] = "model"


ChartPayload = ScatterPayload | LinePayload | HistPayload | TablePayload | MatrixPayload | ModelPayload


@dataclass(frozen=True)
class ChartData:
    """Availability flag plus the payload when the chart could be built."""

    available: bool
    payload: ChartPayload | None = field(default=None)


def payload_has_data(payload: ChartPayload) -> bool:
    """Return whether a payload carries anything worth rendering."""

    if isinstance(payload, ScatterPayload):
        return bool(payload.points)
    if isinstance(payload, HistPayload):
        return bool(payload.bins)
    if isinstance(payload, LinePayload):
        return any(series.values for series in payload.series)
    if isinstance(payload, TablePayload):
        return bool(payload.rows)
    if isinstance(payload, MatrixPayload):
        return bool(payload.variables)
    return payload.model.n > 0
