"""End-to-end tests for `compute_analytics` and the artifact codec."""

from __future__ import annotations

import json

import pytest
from pytest import approx

from analysis.codec import decode_radar_columns, decode_radar_shots, encode_radar_analytics
from analysis.config import RadarConfig, RadarThresholds, default_radar_config
from analysis.dto import ANALYTICS_VERSION, RadarColumn
from analysis.engine import compute_analytics
from analysis.segments import SEGMENT_DIMENSIONS

pytestmark = pytest.mark.unit


@pytest.fixture
def analytics(radar_columns, radar_shots):
    """Return the artifact for the reference session."""

    return compute_analytics(
        radar_columns,
        radar_shots,
        metadata={"club": "Fer 7 / 7 Iron", "ball": "Pro V1"},
    )


def test_compute_analytics_reports_meta(analytics) -> None:
    """Meta lists units, shot count and unbound statistic fields."""

    meta = analytics.meta

    assert analytics.version == ANALYTICS_VERSION
    assert meta.shot_count == 12
    assert meta.units["carry"] == "m"
    assert meta.units["radial_miss"] == "m"
    assert meta.missing_columns == (
        "roll",
        "curve",
        "descent_v",
        "height",
        "time",
        "path",
        "aoa",
        "low_point",
        "spin_loft",
    )
    assert meta.club == "Fer 7 / 7 Iron"
    assert meta.ball == "Pro V1"
    assert meta.benchmark is not None
    assert meta.benchmark["club"] == "7 Iron"


def test_compute_analytics_stats_and_corridors(analytics) -> None:
    """Global stats skip missing cells; corridors use the carry target."""

    assert analytics.derived.carry_target == approx(149.78333, abs=1e-4)
    assert analytics.global_stats["carry"].count == 12
    assert analytics.global_stats["lateral"].count == 11
    assert analytics.global_stats["spin_axis"].count == 11
    assert analytics.global_stats["roll"].count == 0
    assert analytics.global_stats["roll"].mean is None
    assert analytics.derived.corridors.within_lat10 == approx(90.9)


def test_compute_analytics_flags_short_carry(analytics) -> None:
    """The 138 m mishit is the carry outlier and the worst distance miss."""

    outliers = analytics.outliers

    assert outliers.method == "iqr"
    assert outliers.by_metric["carry"] == (6,)
    assert "carry" in outliers.flags["6"]
    assert outliers.worst10_distance == (6, 3)
    assert len(outliers.worst10_dispersion) == 2
    assert len(outliers.top20_strikes) == 3


def test_compute_analytics_builds_segments_models_and_charts(analytics) -> None:
    """Every dimension, the distance model and the full chart catalog are present."""

    assert list(analytics.segments) == [key for key, _selector in SEGMENT_DIMENSIONS]
    by_type = {summary.key: summary.count for summary in analytics.segments["byShotType"].summaries}
    assert by_type == {"Draw": 7, "Fade": 5}
    assert analytics.correlations is not None
    assert analytics.correlations.variables[0] == "carry"
    assert analytics.models.regression_distance is not None
    assert analytics.models.regression_distance.n == 12
    assert len(analytics.charts_data) == 42
    assert analytics.charts_data["dispersion_scatter"].available is True
    assert analytics.charts_data["hist_roll"].available is False
    assert analytics.charts_data["model_distance_coeffs"].available is True


def test_compute_analytics_summary_and_insights(analytics) -> None:
    """The summary sentence and base-chart headlines are generated."""

    assert analytics.summary is not None
    assert analytics.summary.startswith("Carry moyen cible 149.8.")
    assert set(analytics.insights) == {"dispersion", "carryTotal", "speeds", "spinCarry", "smash", "faceImpact"}
    assert "90.9% des coups dans ±10 m" in analytics.insights["dispersion"]


def test_compute_analytics_reads_thresholds_from_config(radar_columns, radar_shots) -> None:
    """Outlier method and corridors come from the caller configuration."""

    config = default_radar_config()
    custom = RadarConfig(
        charts=config.charts,
        thresholds=RadarThresholds(lat_corridor=(2.0, 4.0), outlier_method="zrobust"),
    )

    analytics = compute_analytics(radar_columns, radar_shots, config=custom)

    assert analytics.outliers.method == "zrobust"
    assert analytics.derived.corridors.within_lat10 == approx(45.5)
    assert analytics.meta.benchmark is None


def test_compute_analytics_tolerates_empty_input() -> None:
    """No columns and no shots still yield a complete, empty artifact."""

    analytics = compute_analytics([], [])

    assert analytics.meta.shot_count == 0
    assert analytics.derived.carry_target is None
    assert analytics.correlations is None
    assert analytics.summary is None
    assert analytics.insights == {}
    assert not any(data.available for data in analytics.charts_data.values())


def test_encode_radar_analytics_is_json_serializable(analytics) -> None:
    """The encoded artifact uses the camelCase wire shape."""

    encoded = encode_radar_analytics(analytics)
    decoded = json.loads(json.dumps(encoded, ensure_ascii=False))

    assert decoded["version"] == ANALYTICS_VERSION
    assert decoded["meta"]["shotCount"] == 12
    assert decoded["derived"]["corridors"]["withinLat10"] == approx(90.9)
    assert decoded["outliers"]["byMetric"]["carry"] == [6]
    assert decoded["chartsData"]["hist_roll"] == {"available": False}
    assert decoded["chartsData"]["hist_carry"]["payload"]["type"] == "hist"
    assert "carryMean" in decoded["segments"]["byLeftRight"]["summaries"][0]
    assert "regressionDistance" in decoded["models"]
    assert decoded["correlations"]["variables"][0] == "carry"


def test_encode_radar_analytics_omits_absent_sections() -> None:
    """Optional correlations and models are left out when not computed."""

    encoded = encode_radar_analytics(compute_analytics([], []))

    assert "correlations" not in encoded
    assert encoded["models"] == {}
    assert encoded["summary"] is None


def test_decoders_skip_malformed_entries(radar_payload) -> None:
    """Column and shot decoders keep well-formed objects only."""

    columns = decode_radar_columns([*radar_payload["columns"], {"label": "No key"}, "junk"])
    shots = decode_radar_shots([*radar_payload["shots"], 42])

    assert len(columns) == 15
    assert columns[2].unit == "m"
    assert decode_radar_columns([{"key": "carry"}])[0].label == "carry"
    assert len(shots) == 14
    assert decode_radar_columns(None) == ()


def test_compute_analytics_skips_oversized_numbers() -> None:
    """Oversized cells are dropped and oversized shot numbers drop the row."""

    columns = [RadarColumn(key="carry", label="Carry", unit="m")]
    shots = [
        {"shot_index": 1, "carry": 150},
        {"shot_index": 2, "carry": 10**400},
        {"shot_index": 10**400, "carry": 140},
    ]

    analytics = compute_analytics(columns, shots)

    assert analytics.meta.shot_count == 2
    assert analytics.global_stats["carry"].count == 1
    assert analytics.global_stats["carry"].mean == 150.0
