"""Orchestration entry point for radar analytics.

The engine is a pure, non-Django module that accepts in-memory launch-monitor
tables and returns DTOs. It must not import Django or perform any I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from .benchmarks import find_pga_benchmark
from .charts.registry import build_charts_data
from .columns import build_column_map, column_units
from .config import RadarConfig, default_radar_config
from .correlation import correlation_matrix
from .derived import derived_units, enrich_shots
from .dto import (
    CorridorSummary,
    EnrichedShot,
    RadarAnalytics,
    RadarColumn,
    RadarDerived,
    RadarMeta,
    SummaryStat,
)
from .fields import STAT_KEYS
from .outliers import compute_outliers
from .parsing import RawShot, normalize_shots
from .regression import fit_standing_models
from .segments import build_segments
from .stats import corridor_percent, summary_stats
from .summary import build_insights, build_summary

logger = logging.getLogger(__name__)


def _values(shots: Sequence[EnrichedShot], key: str) -> list[float]:
    return [value for shot in shots if (value := shot.number(key)) is not None]


def compute_global_stats(shots: Sequence[EnrichedShot]) -> dict[str, SummaryStat]:
    """Summarize every statistic key over the session."""

    return {key: summary_stats(_values(shots, key)) for key in STAT_KEYS}


def compute_corridors(
    shots: Sequence[EnrichedShot],
    *,
    lat_corridor: tuple[float, float],
    dist_corridor: tuple[float, float],
) -> CorridorSummary:
    """Share of shots inside the inner/outer lateral and distance corridors."""

    lateral = _values(shots, "lateral")
    distance = _values(shots, "distance_from_target")
    return CorridorSummary(
        within_lat5=corridor_percent(lateral, lat_corridor[0]),
        within_lat10=corridor_percent(lateral, lat_corridor[1]),
        within_dist5=corridor_percent(distance, dist_corridor[0]),
        within_dist10=corridor_percent(distance, dist_corridor[1]),
    )


def compute_analytics(
    columns: Iterable[RadarColumn],
    shots: Iterable[RawShot],
    *,
    config: RadarConfig | None = None,
    metadata: Mapping[str, object] | None = None,
) -> RadarAnalytics:
    """Compute the full analytics artifact for one launch-monitor session.

    Args:
        columns: Export table columns in source order.
        shots: Raw rows (cells keyed by column key) in source order.
        config: Optional caller configuration; only thresholds are read.
        metadata: Optional `{"club": ..., "ball": ...}` session labels.

    Returns:
        RadarAnalytics artifact.

    Notes:
        Malformed or sparse input never raises: unbound fields show up in
        `meta.missing_columns`, unparseable cells are dropped, and outputs that
        need more data are omitted.
    """

    thresholds = (config or default_radar_config()).thresholds
    column_map = build_column_map(columns)
    normalized = normalize_shots(shots, column_map=column_map)
    enriched, carry_target = enrich_shots(normalized, thresholds=thresholds)
    units = derived_units(column_units(column_map))

    global_stats = compute_global_stats(enriched)
    corridors = compute_corridors(
        enriched,
        lat_corridor=thresholds.lat_corridor,
        dist_corridor=thresholds.dist_corridor,
    )
    segments = build_segments(
        enriched,
        lat_threshold=thresholds.lat_corridor[1],
        dist_threshold=thresholds.dist_corridor[1],
    )
    outliers = compute_outliers(enriched, thresholds.outlier_metrics, method=thresholds.outlier_method)
    correlations = correlation_matrix(enriched)
    models = fit_standing_models(enriched)
    charts_data = build_charts_data(enriched, units, correlations=correlations, models=models)

    meta_raw = metadata or {}
    club = meta_raw.get("club")
    ball = meta_raw.get("ball")
    club_label = club if isinstance(club, str) else None
    benchmark = find_pga_benchmark(club_label)

    analytics = RadarAnalytics(
        meta=RadarMeta(
            units=units,
            shot_count=len(enriched),
            missing_columns=tuple(key for key in STAT_KEYS if key not in units),
            club=club_label,
            ball=ball if isinstance(ball, str) else None,
            benchmark=benchmark.as_dict() if benchmark is not None else None,
        ),
        derived=RadarDerived(carry_target=carry_target, corridors=corridors),
        global_stats=global_stats,
        segments=segments,
        outliers=outliers,
        models=models,
        charts_data=charts_data,
        correlations=correlations,
        summary=build_summary(global_stats, carry_target),
        insights=build_insights(global_stats, units, corridors, lat_corridor=thresholds.lat_corridor[1]),
    )
    logger.info(
        "Computed radar analytics: %d shot(s), %d bound field(s), %d/%d chart(s) available.",
        len(enriched),
        len(column_map),
        sum(1 for data in charts_data.values() if data.available),
        len(charts_data),
    )
    return analytics
