"""JSON encoding/decoding helpers for radar analytics payloads.

`encode_radar_analytics` renders the artifact in its camelCase wire shape.
The decoders accept the upstream `{columns, shots}` table and are best-effort:
malformed entries are skipped rather than rejected.
"""

from __future__ import annotations

from typing import Any

from .charts.payloads import (
    ChartData,
    ChartPayload,
    HistPayload,
    LinePayload,
    MatrixPayload,
    ModelPayload,
    ScatterPayload,
    TablePayload,
)
from .dto import (
    CorrelationMatrix,
    OutlierResult,
    RadarAnalytics,
    RadarColumn,
    RegressionModel,
    Segment,
    SummaryStat,
)


def encode_summary_stat(stat: SummaryStat) -> dict[str, Any]:
    """Encode a SummaryStat."""

    return {
        "count": stat.count,
        "mean": stat.mean,
        "std": stat.std,
        "cv": stat.cv,
        "median": stat.median,
        "p10": stat.p10,
        "p90": stat.p90,
    }


def encode_segment(segment: Segment) -> dict[str, Any]:
    """Encode one segmentation dimension."""

    return {
        "key": segment.key,
        "summaries": [
            {
                "key": summary.key,
                "count": summary.count,
                "carryMean": summary.carry_mean,
                "carryStd": summary.carry_std,
                "totalMean": summary.total_mean,
                "totalStd": summary.total_std,
                "lateralMean": summary.lateral_mean,
                "lateralStd": summary.lateral_std,
                "smashMean": summary.smash_mean,
                "rpmMean": summary.rpm_mean,
                "launchVMean": summary.launch_v_mean,
                "ftpMean": summary.ftp_mean,
                "pathMean": summary.path_mean,
                "withinLat10": summary.within_lat10,
                "withinDist10": summary.within_dist10,
            }
            for summary in segment.summaries
        ],
    }


def encode_outliers(outliers: OutlierResult) -> dict[str, Any]:
    """Encode outlier flags and rankings."""

    return {
        "method": outliers.method,
        "byMetric": {key: list(indices) for key, indices in outliers.by_metric.items()},
        "flags": {index: list(metrics) for index, metrics in outliers.flags.items()},
        "worst10_distance": list(outliers.worst10_distance),
        "worst10_dispersion": list(outliers.worst10_dispersion),
        "top20_strikes": list(outliers.top20_strikes),
    }


def encode_correlations(correlations: CorrelationMatrix) -> dict[str, Any]:
    """Encode a correlation matrix."""

    return {
        "variables": list(correlations.variables),
        "matrix": [list(row) for row in correlations.matrix],
    }


def encode_model(model: RegressionModel) -> dict[str, Any]:
    """Encode a regression model."""

    return {
        "name": model.name,
        "coefficients": dict(model.coefficients),
        "intercept": model.intercept,
        "r2": model.r2,
        "n": model.n,
        "features": list(model.features),
    }


def encode_chart_payload(payload: ChartPayload) -> dict[str, Any]:
    """Encode a chart payload, including its `type` tag."""

    encoded: dict[str, Any] = {"type": payload.type, "title": payload.title}
    if isinstance(payload, ScatterPayload):
        encoded.update(
            {
                "xLabel": payload.x_label,
                "yLabel": payload.y_label,
                "xUnit": payload.x_unit,
                "yUnit": payload.y_unit,
                "points": [
                    {"x": point.x, "y": point.y, "shotIndex": point.shot_index} for point in payload.points
                ],
            }
        )
    elif isinstance(payload, LinePayload):
        encoded.update(
            {
                "xLabel": payload.x_label,
                "yLabel": payload.y_label,
                "yUnit": payload.y_unit,
                "series": [{"label": series.label, "values": list(series.values)} for series in payload.series],
            }
        )
    elif isinstance(payload, HistPayload):
        encoded.update(
            {
                "xLabel": payload.x_label,
                "yLabel": payload.y_label,
                "xUnit": payload.x_unit,
                "bins": [{"label": bin_.label, "count": bin_.count} for bin_ in payload.bins],
            }
        )
    elif isinstance(payload, TablePayload):
        encoded.update({"columns": list(payload.columns), "rows": [dict(row) for row in payload.rows]})
    elif isinstance(payload, MatrixPayload):
        encoded.update(
            {
                "variables": list(payload.variables),
                "matrix": [list(row) for row in payload.matrix],
            }
        )
    elif isinstance(payload, ModelPayload):
        encoded["model"] = encode_model(payload.model)
    encoded["notes"] = payload.notes
    encoded["insight"] = payload.insight
    return encoded


def encode_chart_data(data: ChartData) -> dict[str, Any]:
    """Encode availability plus the payload when present."""

    encoded: dict[str, Any] = {"available": data.available}
    if data.payload is not None:
        encoded["payload"] = encode_chart_payload(data.payload)
    return encoded


def encode_radar_analytics(analytics: RadarAnalytics) -> dict[str, Any]:
    """Encode a RadarAnalytics artifact into a JSON-serializable dictionary.

    Args:
        analytics: Artifact returned by `compute_analytics`.

    Returns:
        Dict payload in the camelCase wire shape. Optional sections
        (`correlations`, models) are omitted when absent.
    """

    meta = analytics.meta
    corridors = analytics.derived.corridors
    models: dict[str, Any] = {}
    if analytics.models.regression_distance is not None:
        models["regressionDistance"] = encode_model(analytics.models.regression_distance)
    if analytics.models.regression_lateral is not None:
        models["regressionLateral"] = encode_model(analytics.models.regression_lateral)

    payload: dict[str, Any] = {
        "version": analytics.version,
        "meta": {
            "units": dict(meta.units),
            "club": meta.club,
            "ball": meta.ball,
            "shotCount": meta.shot_count,
            "missingColumns": list(meta.missing_columns),
            "benchmark": meta.benchmark,
        },
        "derived": {
            "carryTarget": analytics.derived.carry_target,
            "corridors": {
                "withinLat5": corridors.within_lat5,
                "withinLat10": corridors.within_lat10,
                "withinDist5": corridors.within_dist5,
                "withinDist10": corridors.within_dist10,
            },
        },
        "globalStats": {key: encode_summary_stat(stat) for key, stat in analytics.global_stats.items()},
        "segments": {key: encode_segment(segment) for key, segment in analytics.segments.items()},
        "outliers": encode_outliers(analytics.outliers),
        "models": models,
        "chartsData": {key: encode_chart_data(data) for key, data in analytics.charts_data.items()},
        "summary": analytics.summary,
        "insights": dict(analytics.insights),
    }
    if analytics.correlations is not None:
        payload["correlations"] = encode_correlations(analytics.correlations)
    return payload


def decode_radar_columns(payload: object) -> tuple[RadarColumn, ...]:
    """Decode the export table columns.

    Args:
        payload: A list of `{key, label?, group?, unit?}` objects. Entries
            without a usable key are skipped.

    Returns:
        RadarColumn tuple in source order.
    """

    if not isinstance(payload, list):
        return ()
    columns: list[RadarColumn] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        key = _parse_str(entry.get("key"))
        if key is None:
            continue
        columns.append(
            RadarColumn(
                key=key,
                label=_parse_str(entry.get("label")) or key,
                group=_parse_str(entry.get("group")),
                unit=_parse_str(entry.get("unit")),
            )
        )
    return tuple(columns)


def decode_radar_shots(payload: object) -> tuple[dict[str, Any], ...]:
    """Decode raw shot rows, keeping only object entries."""

    if not isinstance(payload, list):
        return ()
    return tuple(dict(entry) for entry in payload if isinstance(entry, dict))


def _parse_str(value: object) -> str | None:
    """Return non-empty strings unchanged, stringify numbers, else None."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None
