"""Unit tests for the chart catalog, payload builders and insights."""

from __future__ import annotations

import pytest

from analysis.charts.builders import histogram_bins, min_median_max_rows, scatter_points
from analysis.charts.insights import (
    auto_description,
    build_insight,
    format_value,
    js_round,
    number_text,
    to_fixed,
)
from analysis.charts.payloads import (
    HistBin,
    HistPayload,
    LinePayload,
    LineSeries,
    MatrixPayload,
    ModelPayload,
    ScatterPayload,
    ScatterPoint,
)
from analysis.charts.registry import (
    DEFAULT_CHART_REGISTRY,
    RADAR_CHART_GROUPS,
    ChartDefinition,
    ChartRegistry,
    build_charts_data,
)
from analysis.dto import CorrelationMatrix, RegressionModel

pytestmark = pytest.mark.unit


def _noop_build(context):
    raise AssertionError("not built")


def test_default_registry_lists_unique_charts_in_groups() -> None:
    """The catalog declares 42 charts across the 9 display groups."""

    definitions = DEFAULT_CHART_REGISTRY.list()
    keys = [definition.key for definition in definitions]

    assert len(keys) == 42
    assert len(set(keys)) == 42
    assert [group.key for group in DEFAULT_CHART_REGISTRY.groups()] == [group.key for group in RADAR_CHART_GROUPS]
    assert keys[0] == "dispersion_scatter"
    assert keys[-3:] == ["corr_heatmap", "model_distance_coeffs", "model_lateral_coeffs"]
    assert all(definition.description for definition in definitions)
    assert [d.key for d in DEFAULT_CHART_REGISTRY.by_group("analysis")] == keys[-3:]
    assert DEFAULT_CHART_REGISTRY.get("missing") is None


def test_registry_rejects_duplicate_keys() -> None:
    """Duplicate chart keys fail fast at registry construction."""

    definition = ChartDefinition(key="x", title="X", group="distance", required=(), build=_noop_build)

    with pytest.raises(ValueError, match="Duplicate ChartDefinition key"):
        ChartRegistry([definition, definition], RADAR_CHART_GROUPS)


def test_registry_rejects_unknown_group() -> None:
    """Definitions must reference a declared group."""

    definition = ChartDefinition(key="x", title="X", group="nowhere", required=(), build=_noop_build)

    with pytest.raises(ValueError, match="unknown group"):
        ChartRegistry([definition], RADAR_CHART_GROUPS)


def test_auto_description_follows_title_shape() -> None:
    """Descriptions are derived from histogram, timeline and versus titles."""

    assert auto_description("Histogramme carry") == "Distribution des coups pour carry."
    assert auto_description("Carry dans le temps") == "Evolution de Carry sur la serie."
    assert auto_description("Matrice de correlation") == "Relation entre variables (correlations)."
    assert auto_description("Modele distance") == "Impact des variables sur la metrique cible."
    assert auto_description("Launch V vs RPM") == "Relation entre Launch V et RPM."
    assert auto_description("Impact map") == "Analyse de impact map."


def test_number_formatting_rounds_half_away_from_zero() -> None:
    """Fixed-point rendering keeps trailing zeros; number text drops them."""

    assert to_fixed(2.5, 0) == "3"
    assert to_fixed(-2.5, 0) == "-3"
    assert to_fixed(-0.0, 1) == "0.0"
    assert to_fixed(12.0, 1) == "12.0"
    assert js_round(1.456, 2) == 1.46
    assert number_text(12.0) == "12"
    assert number_text(1.5) == "1.5"
    assert format_value(12.04, "m") == "12 m"
    assert format_value(12.345) == "12.3"
    assert format_value(None, "m") is None


def test_histogram_bins_cover_the_range(shot_factory) -> None:
    """Ten equal bins span [min, max]; the max lands in the last bin."""

    shots = shot_factory([{"carry": float(value)} for value in range(11)])

    bins = histogram_bins(shots, "carry")

    assert len(bins) == 10
    assert bins[0] == HistBin(label="0.0-1.0", count=1)
    assert bins[-1] == HistBin(label="9.0-10.0", count=2)
    assert sum(bin_.count for bin_ in bins) == 11


def test_histogram_bins_widen_zero_range(shot_factory) -> None:
    """Identical values all fall in the first bin."""

    shots = shot_factory([{"carry": 5.0}] * 4)

    bins = histogram_bins(shots, "carry")

    assert bins[0] == HistBin(label="5.0-5.1", count=4)
    assert histogram_bins(shot_factory([{}]), "carry") == ()


def test_scatter_points_and_table_rows(shot_factory) -> None:
    """Scatter points skip incomplete shots; tables group by label."""

    shots = shot_factory(
        [{"carry": 100.0, "total": 110.0}, {"carry": 110.0}, {"carry": 105.0}, {"carry": 90.0}],
        shot_type=["A", "A", "A", "B"],
    )

    points = scatter_points(shots, "carry", "total")
    rows = min_median_max_rows(shots, "shot_type", "carry")

    assert points == (ScatterPoint(x=100.0, y=110.0, shot_index=1),)
    assert rows == (
        {"Groupe": "A", "Count": 3, "Min": 100.0, "Median": 105.0, "Max": 110.0},
        {"Groupe": "B", "Count": 1, "Min": 90.0, "Median": 90.0, "Max": 90.0},
    )


def test_build_insight_for_line_and_histogram() -> None:
    """Line captions report amplitude and trend; histograms the dominant bin."""

    line = LinePayload(
        title="Carry dans le temps",
        x_label="Coups",
        y_label="Carry",
        y_unit="m",
        series=(LineSeries(label="Carry", values=(1.0, 2.0, 3.0, 10.0)),),
    )
    hist = HistPayload(
        title="Histogramme carry",
        x_label="Carry",
        y_label="Coups",
        x_unit="m",
        bins=(HistBin("0.0-1.0", 1), HistBin("1.0-2.0", 3), HistBin("2.0-3.0", 3)),
    )

    assert build_insight(line) == "Amplitude 9 m · Tendance en hausse (Δ 9 m)."
    assert build_insight(hist) == "Zone dominante 1.0-2.0 m (43% des coups)."


def test_build_insight_for_scatter_matrix_and_model() -> None:
    """Scatter, matrix and model captions name the strongest relation."""

    scatter = ScatterPayload(
        title="Carry vs total",
        x_label="Carry",
        y_label="Total",
        points=tuple(ScatterPoint(x=float(x), y=2.0 * x, shot_index=x) for x in range(1, 7)),
    )
    matrix = MatrixPayload(
        title="Matrice de correlation",
        variables=("carry", "total", "lateral"),
        matrix=((1.0, 0.8, -0.1), (0.8, 1.0, -0.95), (-0.1, -0.95, 1.0)),
    )
    model = ModelPayload(
        title="Modele distance",
        model=RegressionModel(
            name="carry",
            coefficients={"ball_speed": 0.8, "launch_v": -1.25},
            intercept=2.0,
            r2=0.912,
            n=12,
            features=("ball_speed", "launch_v"),
        ),
    )

    assert build_insight(scatter).startswith("Relation forte positive (r=1.00).")
    assert build_insight(matrix) == "Correlation la plus forte: total vs lateral (r=-0.95)."
    assert build_insight(model) == "R2 0.91 - facteur dominant: launch_v (-1.25)."


def test_build_charts_data_gates_on_bound_fields(shot_factory) -> None:
    """Charts whose inputs are unbound are unavailable without a payload."""

    shots = shot_factory([{"carry": 150.0 + i, "total": 160.0 + i} for i in range(8)])
    units = {"carry": "m", "total": "m"}

    charts = build_charts_data(
        shots,
        units,
        correlations=CorrelationMatrix(variables=("carry", "total"), matrix=((1.0, 1.0), (1.0, 1.0))),
    )

    assert list(charts) == [definition.key for definition in DEFAULT_CHART_REGISTRY.list()]
    assert charts["hist_roll"].available is False
    assert charts["hist_roll"].payload is None
    assert charts["hist_carry"].available is True
    assert charts["hist_carry"].payload.insight is not None
    assert charts["carry_vs_total"].available is True
    assert charts["corr_heatmap"].available is True


def test_build_charts_data_uses_placeholders_for_missing_analysis(shot_factory) -> None:
    """Missing correlations and models still yield an explanatory payload."""

    charts = build_charts_data(shot_factory([{"carry": 150.0}]), {"carry": "m"})

    heatmap = charts["corr_heatmap"]
    assert heatmap.available is False
    assert heatmap.payload.notes == "Données insuffisantes."
    model = charts["model_distance_coeffs"]
    assert model.available is False
    assert model.payload.model.name == "Distance"
    assert model.payload.notes == "Modele indisponible."
