"""Static catalog of radar charts and the chart-data builder.

Definitions are declared once, in display order. A definition lists the
canonical or derived fields it needs; when any of them is missing from the
session units map the chart is reported unavailable without building a
payload. Analysis charts (matrix, models) have no field requirements and
build from the precomputed correlations and regressions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Final

from analysis.dto import CorrelationMatrix, EnrichedShot, RadarModels, RegressionModel

from .builders import TABLE_COLUMNS, histogram_bins, line_values, min_median_max_rows, scatter_points
from .insights import auto_description, build_insight
from .payloads import (
    ChartData,
    ChartPayload,
    HistPayload,
    LinePayload,
    LineSeries,
    MatrixPayload,
    ModelPayload,
    ScatterPayload,
    TablePayload,
    payload_has_data,
)


@dataclass(frozen=True)
class ChartContext:
    """Inputs available to chart builders for one computation."""

    shots: Sequence[EnrichedShot]
    units: Mapping[str, str | None]
    correlations: CorrelationMatrix | None = None
    models: RadarModels = field(default_factory=RadarModels)


ChartBuilder = Callable[[ChartContext], ChartPayload]


@dataclass(frozen=True)
class ChartGroup:
    """A display group of related charts."""

    key: str
    label: str
    description: str | None = None


@dataclass(frozen=True)
class ChartDefinition:
    """Describe one chart of the catalog.

    Args:
        key: Stable chart key referenced by RadarConfig.charts.
        title: Display title.
        group: ChartGroup key.
        required: Fields that must be bound in the units map.
        build: Payload builder.
        description: Optional description; derived from the title when omitted.
    """

    key: str
    title: str
    group: str
    required: tuple[str, ...]
    build: ChartBuilder
    description: str | None = None


RADAR_CHART_GROUPS: Final[tuple[ChartGroup, ...]] = (
    ChartGroup(key="dispersion", label="Dispersion & precision"),
    ChartGroup(key="distance", label="Distance & regularite"),
    ChartGroup(key="speed", label="Vitesse & efficacite"),
    ChartGroup(key="launch", label="Launch & Spin"),
    ChartGroup(key="direction", label="Face/Path & direction"),
    ChartGroup(key="aoa", label="AOA & dynamique"),
    ChartGroup(key="impact", label="Impact face"),
    ChartGroup(key="plane", label="Swing plane"),
    ChartGroup(key="analysis", label="Correlations & modeles"),
)


class ChartRegistry:
    """Lookup helpers for chart definitions."""

    def __init__(self, definitions: Iterable[ChartDefinition], groups: Iterable[ChartGroup]) -> None:
        """Initialize a registry, preserving declaration order."""

        self._groups: dict[str, ChartGroup] = {}
        for group in groups:
            if group.key in self._groups:
                raise ValueError(f"Duplicate ChartGroup key: {group.key!r}")
            self._groups[group.key] = group

        self._definitions: dict[str, ChartDefinition] = {}
        for definition in definitions:
            if definition.key in self._definitions:
                raise ValueError(f"Duplicate ChartDefinition key: {definition.key!r}")
            if definition.group not in self._groups:
                raise ValueError(
                    f"ChartDefinition[{definition.key!r}] has unknown group={definition.group!r}."
                )
            if definition.description is None:
                definition = replace(definition, description=auto_description(definition.title))
            self._definitions[definition.key] = definition

    def get(self, key: str) -> ChartDefinition | None:
        """Return a definition for a chart key, or None when missing."""

        return self._definitions.get(key)

    def list(self) -> tuple[ChartDefinition, ...]:
        """Return all definitions in declaration order."""

        return tuple(self._definitions.values())

    def groups(self) -> tuple[ChartGroup, ...]:
        """Return all groups in declaration order."""

        return tuple(self._groups.values())

    def by_group(self, group: str) -> tuple[ChartDefinition, ...]:
        """Return the definitions of one group in declaration order."""

        return tuple(definition for definition in self._definitions.values() if definition.group == group)


def _scatter(
    key: str,
    title: str,
    group: str,
    *,
    x: tuple[str, str],
    y: tuple[str, str],
) -> ChartDefinition:
    """Declare a scatter chart from `(metric key, axis label)` pairs."""

    x_key, x_label = x
    y_key, y_label = y

    def build(context: ChartContext) -> ChartPayload:
        return ScatterPayload(
            title=title,
            x_label=x_label,
            y_label=y_label,
            x_unit=context.units.get(x_key),
            y_unit=context.units.get(y_key),
            points=scatter_points(context.shots, x_key, y_key),
        )

    return ChartDefinition(key=key, title=title, group=group, required=(x_key, y_key), build=build)


def _line(
    key: str,
    title: str,
    group: str,
    *,
    metric: str,
    y_label: str,
    series_label: str,
    unit_keys: tuple[str, ...] | None = None,
) -> ChartDefinition:
    """Declare a metric-over-time chart.

    `unit_keys` lists the units map keys tried in order for the y unit; pass an
    empty tuple for unitless metrics.
    """

    keys = (metric,) if unit_keys is None else unit_keys

    def build(context: ChartContext) -> ChartPayload:
        unit = next((context.units[k] for k in keys if context.units.get(k)), None)
        return LinePayload(
            title=title,
            x_label="Coups",
            y_label=y_label,
            y_unit=unit,
            series=(LineSeries(label=series_label, values=line_values(context.shots, metric)),),
        )

    return ChartDefinition(key=key, title=title, group=group, required=(metric,), build=build)


def _hist(key: str, title: str, group: str, *, metric: str, x_label: str, with_unit: bool = True) -> ChartDefinition:
    """Declare a 10-bin histogram."""

    def build(context: ChartContext) -> ChartPayload:
        return HistPayload(
            title=title,
            x_label=x_label,
            y_label="Coups",
            x_unit=context.units.get(metric) if with_unit else None,
            bins=histogram_bins(context.shots, metric),
        )

    return ChartDefinition(key=key, title=title, group=group, required=(metric,), build=build)


def _table(key: str, title: str, group: str, *, group_by: str, metric: str) -> ChartDefinition:
    """Declare a per-group min/median/max table."""

    def build(context: ChartContext) -> ChartPayload:
        return TablePayload(
            title=title,
            columns=TABLE_COLUMNS,
            rows=min_median_max_rows(context.shots, group_by, metric),
            notes="Boxplot approxime (min/median/max).",
        )

    return ChartDefinition(key=key, title=title, group=group, required=(group_by, metric), build=build)


def _build_correlation_heatmap(context: ChartContext) -> ChartPayload:
    correlations = context.correlations
    if correlations is None or not correlations.variables:
        return MatrixPayload(title="Matrice de correlation", notes="Données insuffisantes.")
    return MatrixPayload(
        title="Matrice de correlation",
        variables=correlations.variables,
        matrix=correlations.matrix,
    )


def _model(key: str, title: str, *, attribute: str, placeholder_name: str) -> ChartDefinition:
    """Declare a regression coefficients chart backed by `RadarModels.<attribute>`."""

    def build(context: ChartContext) -> ChartPayload:
        model = getattr(context.models, attribute)
        if model is None:
            placeholder = RegressionModel(
                name=placeholder_name,
                coefficients={},
                intercept=0.0,
                r2=0.0,
                n=0,
                features=(),
            )
            return ModelPayload(title=title, model=placeholder, notes="Modele indisponible.")
        return ModelPayload(title=title, model=model)

    return ChartDefinition(key=key, title=title, group="analysis", required=(), build=build)


RADAR_CHART_DEFINITIONS: Final[tuple[ChartDefinition, ...]] = (
    # Dispersion & precision
    _scatter(
        "dispersion_scatter",
        "Dispersion (carry vs lateral)",
        "dispersion",
        x=("lateral", "Lateral"),
        y=("carry", "Carry"),
    ),
    _line(
        "dispersion_radial_over_time",
        "Dispersion radiale dans le temps",
        "dispersion",
        metric="radial_miss",
        y_label="Radial miss",
        series_label="Radial",
        unit_keys=("radial_miss", "carry"),
    ),
    _table(
        "dispersion_by_shot_type_lateral",
        "Dispersion lateral par type",
        "dispersion",
        group_by="shot_type",
        metric="lateral",
    ),
    _table(
        "dispersion_by_shot_type_carry",
        "Dispersion carry par type",
        "dispersion",
        group_by="shot_type",
        metric="carry",
    ),
    _scatter("curve_vs_lateral", "Curve vs lateral", "dispersion", x=("curve", "Curve"), y=("lateral", "Lateral")),
    # Distance & regularite
    _hist("hist_carry", "Histogramme carry", "distance", metric="carry", x_label="Carry"),
    _hist("hist_total", "Histogramme total", "distance", metric="total", x_label="Total"),
    _hist("hist_roll", "Histogramme roll", "distance", metric="roll", x_label="Roll"),
    _line(
        "carry_over_time",
        "Carry dans le temps",
        "distance",
        metric="carry",
        y_label="Carry",
        series_label="Carry",
    ),
    _scatter("carry_vs_total", "Carry vs total", "distance", x=("carry", "Carry"), y=("total", "Total")),
    _scatter("roll_vs_descent", "Roll vs descent", "distance", x=("descent_v", "Descent V"), y=("roll", "Roll")),
    # Vitesse & efficacite
    _scatter(
        "club_vs_ball_speed",
        "Club vs ball speed",
        "speed",
        x=("club_speed", "Club"),
        y=("ball_speed", "Balle"),
    ),
    _hist("smash_hist", "Histogramme smash", "speed", metric="smash", x_label="Smash", with_unit=False),
    _line(
        "smash_over_time",
        "Smash dans le temps",
        "speed",
        metric="smash",
        y_label="Smash",
        series_label="Smash",
        unit_keys=(),
    ),
    _scatter(
        "ball_speed_vs_carry",
        "Vitesse balle vs carry",
        "speed",
        x=("ball_speed", "Ball speed"),
        y=("carry", "Carry"),
    ),
    _scatter(
        "spinloft_vs_smash",
        "Spin loft vs smash",
        "speed",
        x=("spin_loft", "Spin loft"),
        y=("smash", "Smash"),
    ),
    _scatter(
        "club_speed_vs_smash",
        "Club speed vs smash",
        "speed",
        x=("club_speed", "Club speed"),
        y=("smash", "Smash"),
    ),
    # Launch & Spin
    _scatter("launchV_vs_rpm", "Launch V vs RPM", "launch", x=("launch_v", "Launch V"), y=("spin_rpm", "RPM")),
    _scatter("height_vs_carry", "Height vs carry", "launch", x=("height", "Height"), y=("carry", "Carry")),
    _scatter("height_vs_rpm", "Height vs RPM", "launch", x=("height", "Height"), y=("spin_rpm", "RPM")),
    _scatter("descent_vs_rpm", "Descent V vs RPM", "launch", x=("descent_v", "Descent V"), y=("spin_rpm", "RPM")),
    _scatter(
        "spin_axis_vs_lateral",
        "Spin axis vs lateral",
        "launch",
        x=("spin_axis", "Spin axis"),
        y=("lateral", "Lateral"),
    ),
    # Face/Path & direction
    _scatter("path_vs_ftp", "Path vs FTP", "direction", x=("path", "Path"), y=("ftp", "FTP")),
    _scatter("launchH_vs_ftp", "Launch H vs FTP", "direction", x=("launch_h", "Launch H"), y=("ftp", "FTP")),
    _scatter("spin_axis_vs_ftp", "Spin axis vs FTP", "direction", x=("spin_axis", "Spin axis"), y=("ftp", "FTP")),
    # AOA & dynamique
    _scatter("aoa_vs_low_point", "AOA vs Low Point", "aoa", x=("aoa", "AOA"), y=("low_point", "Low Point")),
    _scatter("aoa_vs_rpm", "AOA vs RPM", "aoa", x=("aoa", "AOA"), y=("spin_rpm", "RPM")),
    _scatter("aoa_vs_carry", "AOA vs Carry", "aoa", x=("aoa", "AOA"), y=("carry", "Carry")),
    _scatter(
        "low_point_vs_smash",
        "Low point vs Smash",
        "aoa",
        x=("low_point", "Low Point"),
        y=("smash", "Smash"),
    ),
    _scatter(
        "dloft_vs_launchV",
        "Dynamic loft vs Launch V",
        "aoa",
        x=("dloft", "Dynamic loft"),
        y=("launch_v", "Launch V"),
    ),
    # Impact face
    _scatter(
        "impact_map",
        "Impact map",
        "impact",
        x=("impact_lat", "Impact lateral"),
        y=("impact_vert", "Impact vertical"),
    ),
    _scatter(
        "impact_lat_vs_smash",
        "Impact lat vs Smash",
        "impact",
        x=("impact_lat", "Impact lateral"),
        y=("smash", "Smash"),
    ),
    _scatter(
        "impact_lat_vs_spin_axis",
        "Impact lat vs Spin axis",
        "impact",
        x=("impact_lat", "Impact lateral"),
        y=("spin_axis", "Spin axis"),
    ),
    _scatter(
        "impact_vert_vs_launchV",
        "Impact vert vs Launch V",
        "impact",
        x=("impact_vert", "Impact vertical"),
        y=("launch_v", "Launch V"),
    ),
    _scatter(
        "impact_vert_vs_rpm",
        "Impact vert vs RPM",
        "impact",
        x=("impact_vert", "Impact vertical"),
        y=("spin_rpm", "RPM"),
    ),
    # Swing plane
    _scatter(
        "swing_planeH_vs_path",
        "Swing plane H vs Path",
        "plane",
        x=("swing_plane_h", "Swing plane H"),
        y=("path", "Path"),
    ),
    _line(
        "swing_planeH_over_time",
        "Swing plane H dans le temps",
        "plane",
        metric="swing_plane_h",
        y_label="Swing plane H",
        series_label="Swing plane H",
    ),
    _line(
        "swing_planeV_over_time",
        "Swing plane V dans le temps",
        "plane",
        metric="swing_plane_v",
        y_label="Swing plane V",
        series_label="Swing plane V",
    ),
    _scatter(
        "swing_planeV_vs_height",
        "Swing plane V vs Height",
        "plane",
        x=("swing_plane_v", "Swing plane V"),
        y=("height", "Height"),
    ),
    # Correlations & modeles
    ChartDefinition(
        key="corr_heatmap",
        title="Matrice de correlation",
        group="analysis",
        required=(),
        build=_build_correlation_heatmap,
    ),
    _model(
        "model_distance_coeffs",
        "Modele distance",
        attribute="regression_distance",
        placeholder_name="Distance",
    ),
    _model(
        "model_lateral_coeffs",
        "Modele lateral",
        attribute="regression_lateral",
        placeholder_name="Lateral",
    ),
)

DEFAULT_CHART_REGISTRY: Final[ChartRegistry] = ChartRegistry(RADAR_CHART_DEFINITIONS, RADAR_CHART_GROUPS)


def build_chart_data(definition: ChartDefinition, context: ChartContext) -> ChartData:
    """Build one chart, adding an automatic insight when the builder set none."""

    if any(key not in context.units for key in definition.required):
        return ChartData(available=False)
    payload = definition.build(context)
    if not payload.insight:
        insight = build_insight(payload)
        if insight:
            payload = replace(payload, insight=insight)
    return ChartData(available=payload_has_data(payload), payload=payload)


def build_charts_data(
    shots: Sequence[EnrichedShot],
    units: Mapping[str, str | None],
    *,
    correlations: CorrelationMatrix | None = None,
    models: RadarModels | None = None,
    registry: ChartRegistry = DEFAULT_CHART_REGISTRY,
) -> dict[str, ChartData]:
    """Build every registered chart.

    Args:
        shots: Enriched shots in source order.
        units: Units map of bound (and derived) fields.
        correlations: Correlation matrix, when computed.
        models: Standing regression models.
        registry: Chart catalog to build.

    Returns:
        Chart key -> ChartData, in registry order.
    """

    context = ChartContext(
        shots=shots,
        units=units,
        correlations=correlations,
        models=models or RadarModels(),
    )
    return {definition.key: build_chart_data(definition, context) for definition in registry.list()}
