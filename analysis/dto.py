"""DTO types returned by the Analysis Engine.

DTOs are plain data containers used to transport analytics results to the
report renderer, the chart UI and the narrative generator. They intentionally
avoid any Django dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from .charts.payloads import ChartData

ANALYTICS_VERSION: Final[str] = "radar-analytics-v1"


@dataclass(frozen=True)
class RadarColumn:
    """One column of a launch-monitor export table.

    Attributes:
        key: Column key used to look up raw shot cells.
        label: Vendor display label.
        group: Optional vendor column group (e.g. "Distance", "Club").
        unit: Optional display unit, propagated verbatim to the artifact.
    """

    key: str
    label: str
    group: str | None = None
    unit: str | None = None


@dataclass(frozen=True)
class NormalizedShot:
    """A validated shot with parsed canonical numeric values.

    Attributes:
        shot_index: Positive shot number taken from the raw row.
        shot_type: Optional shot classification label.
        values: Canonical field -> finite float for every parsed field.
    """

    shot_index: int
    shot_type: str | None = None
    values: Mapping[str, float] = field(default_factory=dict)

    def get(self, key: str) -> float | None:
        """Return a canonical numeric value, or None when absent."""

        return self.values.get(key)


_DERIVED_NUMERIC: Final[frozenset[str]] = frozenset(
    {
        "carry_target",
        "distance_from_target",
        "radial_miss",
        "abs_lateral",
        "abs_ftp",
        "abs_launch_h",
        "abs_spin_axis",
        "strike_score",
    }
)

_DERIVED_LABELS: Final[frozenset[str]] = frozenset(
    {
        "left_right",
        "smash_bin",
        "ball_speed_bin",
        "launch_v_bin",
        "abs_ftp_bin",
        "period_tertile",
        "impact_zone",
    }
)


@dataclass(frozen=True)
class EnrichedShot:
    """A normalized shot extended with per-shot derived fields.

    Enriched shots only live for the duration of one analytics computation.
    Chart, segment and correlation code reads them through `number()` and
    `label()` so canonical and derived keys share one lookup path.
    """

    shot: NormalizedShot
    carry_target: float | None = None
    distance_from_target: float | None = None
    radial_miss: float | None = None
    abs_lateral: float | None = None
    abs_ftp: float | None = None
    abs_launch_h: float | None = None
    abs_spin_axis: float | None = None
    left_right: str | None = None
    smash_bin: str | None = None
    ball_speed_bin: str | None = None
    launch_v_bin: str | None = None
    abs_ftp_bin: str | None = None
    period_tertile: str | None = None
    impact_zone: str | None = None
    strike_score: float | None = None

    @property
    def shot_index(self) -> int:
        """Return the underlying shot number."""

        return self.shot.shot_index

    @property
    def shot_type(self) -> str | None:
        """Return the underlying shot classification label."""

        return self.shot.shot_type

    def number(self, key: str) -> float | None:
        """Return a numeric canonical or derived value by key."""

        if key == "shot_index":
            return float(self.shot.shot_index)
        if key in _DERIVED_NUMERIC:
            return getattr(self, key)
        return self.shot.get(key)

    def label(self, key: str) -> str | None:
        """Return a categorical value (shot_type or a derived bucket) by key."""

        if key == "shot_type":
            return self.shot.shot_type
        if key in _DERIVED_LABELS:
            return getattr(self, key)
        return None


@dataclass(frozen=True)
class SummaryStat:
    """Global summary statistics for one metric.

    All statistics are None when `count == 0`. `std` is the population
    standard deviation and `cv` is `|std / mean| * 100`.
    """

    count: int
    mean: float | None = None
    std: float | None = None
    cv: float | None = None
    median: float | None = None
    p10: float | None = None
    p90: float | None = None


@dataclass(frozen=True)
class CorridorSummary:
    """Share (%) of shots inside the lateral and distance corridors."""

    within_lat5: float | None = None
    within_lat10: float | None = None
    within_dist5: float | None = None
    within_dist10: float | None = None


@dataclass(frozen=True)
class SegmentSummary:
    """Aggregates for one bucket of a segmentation dimension."""

    key: str
    count: int
    carry_mean: float | None = None
    carry_std: float | None = None
    total_mean: float | None = None
    total_std: float | None = None
    lateral_mean: float | None = None
    lateral_std: float | None = None
    smash_mean: float | None = None
    rpm_mean: float | None = None
    launch_v_mean: float | None = None
    ftp_mean: float | None = None
    path_mean: float | None = None
    within_lat10: float | None = None
    within_dist10: float | None = None


@dataclass(frozen=True)
class Segment:
    """One segmentation dimension with buckets in first-seen order."""

    key: str
    summaries: tuple[SegmentSummary, ...] = ()


@dataclass(frozen=True)
class OutlierResult:
    """Outlier flags and shot rankings.

    Attributes:
        method: Detection method used ("iqr" or "zrobust").
        by_metric: Metric key -> outlier shot indices in original shot order.
        flags: Shot index (as a string) -> metric keys flagged for that shot.
        worst10_distance: Shots with the largest |distance_from_target|.
        worst10_dispersion: Shots with the largest |radial_miss|.
        top20_strikes: Shots with the highest strike score.
    """

    method: str
    by_metric: dict[str, tuple[int, ...]] = field(default_factory=dict)
    flags: dict[str, tuple[str, ...]] = field(default_factory=dict)
    worst10_distance: tuple[int, ...] = ()
    worst10_dispersion: tuple[int, ...] = ()
    top20_strikes: tuple[int, ...] = ()


@dataclass(frozen=True)
class CorrelationMatrix:
    """Pairwise Pearson correlations over the included variables."""

    variables: tuple[str, ...]
    matrix: tuple[tuple[float, ...], ...]


@dataclass(frozen=True)
class RegressionModel:
    """An ordinary least squares fit with intercept.

    Attributes:
        name: Target metric key.
        coefficients: Feature key -> fitted slope.
        intercept: Fitted intercept.
        r2: Coefficient of determination on the fitted rows.
        n: Number of complete rows used by the fit.
        features: Feature keys in design-matrix order.
    """

    name: str
    coefficients: dict[str, float]
    intercept: float
    r2: float
    n: int
    features: tuple[str, ...]


@dataclass(frozen=True)
class RadarModels:
    """The two standing regression models (either may be omitted)."""

    regression_distance: RegressionModel | None = None
    regression_lateral: RegressionModel | None = None


@dataclass(frozen=True)
class RadarMeta:
    """Artifact metadata: units, session labels and missing bindings."""

    units: dict[str, str | None]
    shot_count: int
    missing_columns: tuple[str, ...] = ()
    club: str | None = None
    ball: str | None = None
    benchmark: dict[str, Any] | None = None


@dataclass(frozen=True)
class RadarDerived:
    """Session-level derived values."""

    carry_target: float | None = None
    corridors: CorridorSummary = field(default_factory=CorridorSummary)


@dataclass(frozen=True)
class RadarAnalytics:
    """Root analytics artifact produced by `compute_analytics`.

    The artifact is built fresh per run and treated as read-only downstream.
    Use `analysis.codec.encode_radar_analytics` for the JSON wire shape.
    """

    meta: RadarMeta
    derived: RadarDerived
    global_stats: dict[str, SummaryStat]
    segments: dict[str, Segment]
    outliers: OutlierResult
    models: RadarModels
    charts_data: dict[str, "ChartData"]
    correlations: CorrelationMatrix | None = None
    summary: str | None = None
    insights: dict[str, str] = field(default_factory=dict)
    version: str = ANALYTICS_VERSION
