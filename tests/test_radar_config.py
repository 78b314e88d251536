"""Unit tests for RadarConfig defaults and its JSON codec."""

from __future__ import annotations

from dataclasses import replace

import pytest

from analysis.charts.registry import DEFAULT_CHART_REGISTRY
from analysis.config import (
    BASE_CHART_KEYS,
    RadarOptions,
    RadarThresholds,
    decode_radar_config,
    default_radar_config,
    encode_radar_config,
)

pytestmark = pytest.mark.unit


def test_default_config_enables_base_charts_only() -> None:
    """Base charts are on; every catalog chart is listed but off."""

    config = default_radar_config()

    assert config.mode == "default"
    assert list(config.charts)[: len(BASE_CHART_KEYS)] == list(BASE_CHART_KEYS)
    assert len(config.charts) == len(BASE_CHART_KEYS) + len(DEFAULT_CHART_REGISTRY.list())
    assert [key for key, enabled in config.charts.items() if enabled] == list(BASE_CHART_KEYS)
    assert config.thresholds.lat_corridor == (5.0, 10.0)
    assert config.thresholds.outlier_method == "iqr"
    assert config.thresholds.bin_quantiles == (0.33, 0.66)


def test_default_config_returns_fresh_instances() -> None:
    """Callers never share the charts mapping."""

    first = default_radar_config()
    second = default_radar_config()

    first.charts["hist_carry"] = True

    assert second.charts["hist_carry"] is False


def test_decode_radar_config_none_yields_defaults() -> None:
    """A missing payload decodes to the default configuration."""

    assert decode_radar_config(None) == default_radar_config()


def test_decode_radar_config_falls_back_on_invalid_values() -> None:
    """Invalid entries are replaced by their defaults individually."""

    config = decode_radar_config(
        {
            "mode": "weird",
            "charts": {"dispersion": 1, "hist_carry": 0},
            "thresholds": {
                "latCorridorMeters": ["abc", "8"],
                "distCorridorMeters": [3],
                "outlierMethod": "mahalanobis",
                "outlierMetrics": ["carry", "total"],
                "bins": {"quantiles": [0.25, 0.75]},
            },
            "options": {"aiNarrative": "sometimes", "aiPreset": ""},
        }
    )

    assert config.mode == "default"
    assert config.charts == {"dispersion": True, "hist_carry": False}
    assert config.thresholds.lat_corridor == (5.0, 8.0)
    assert config.thresholds.dist_corridor == (5.0, 10.0)
    assert config.thresholds.outlier_method == "iqr"
    assert config.thresholds.outlier_metrics == ("carry", "total")
    assert config.thresholds.bin_quantiles == (0.25, 0.75)
    assert config.options.ai_narrative is None
    assert config.options.ai_preset is None


def test_encode_radar_config_round_trips_custom_values() -> None:
    """Encoding a decoded payload reproduces it."""

    config = replace(
        default_radar_config(),
        mode="ai",
        show_table=False,
        thresholds=RadarThresholds(lat_corridor=(3.0, 6.0), outlier_method="zrobust"),
        options=RadarOptions(
            ai_narrative="global",
            ai_selection_keys=("dispersion", "hist_carry"),
            ai_preset="ultra",
            ai_answers={"goal": ["distance", "contact"]},
        ),
    )

    encoded = encode_radar_config(config)

    assert encoded["thresholds"]["latCorridorMeters"] == [3.0, 6.0]
    assert encoded["thresholds"]["outlierMethod"] == "zrobust"
    assert encoded["options"]["aiSelectionKeys"] == ["dispersion", "hist_carry"]
    assert decode_radar_config(encoded) == config
