"""Caller-supplied configuration for radar analytics.

`RadarConfig` is threaded explicitly through every analytics call; the engine
never mutates it. `decode_radar_config` / `encode_radar_config` convert between
the DTO and the camelCase JSON shape stored alongside uploaded sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Literal, cast

from .fields import DEFAULT_OUTLIER_METRICS

ConfigMode = Literal["default", "custom", "ai"]
OutlierMethod = Literal["iqr", "zrobust"]
NarrativeMode = Literal["off", "per-chart", "global"]
PresetName = Literal["ultra", "synthetic", "standard", "pousse", "complet"]
SyntaxName = Literal["exp-tech", "exp-comp", "exp-tech-solution", "exp-solution", "global"]

BASE_CHART_KEYS: Final[tuple[str, ...]] = (
    "dispersion",
    "carryTotal",
    "speeds",
    "spinCarry",
    "smash",
    "faceImpact",
)

DEFAULT_SYNTAX: Final[str] = "exp-tech-solution"
DEFAULT_PRESET: Final[str] = "standard"


@dataclass(frozen=True)
class ImpactCenterBox:
    """Half-widths of the face-impact "center" zone on each axis."""

    lat: float = 0.4
    vert: float = 0.4


@dataclass(frozen=True)
class RadarThresholds:
    """Numeric thresholds used by derived metrics, outliers and segments.

    Args:
        lat_corridor: Inner/outer lateral corridor half-widths.
        dist_corridor: Inner/outer carry-distance corridor half-widths.
        impact_center_box: Face-impact center zone half-widths.
        outlier_method: "iqr" (Tukey fences) or "zrobust" (median/MAD z-score).
        outlier_metrics: Metric keys checked for outliers.
        bin_quantiles: Quantile cut points for low/mid/high bins.
    """

    lat_corridor: tuple[float, float] = (5.0, 10.0)
    dist_corridor: tuple[float, float] = (5.0, 10.0)
    impact_center_box: ImpactCenterBox = field(default_factory=ImpactCenterBox)
    outlier_method: OutlierMethod = "iqr"
    outlier_metrics: tuple[str, ...] = DEFAULT_OUTLIER_METRICS
    bin_quantiles: tuple[float, float] = (0.33, 0.66)


@dataclass(frozen=True)
class RadarOptions:
    """Narrative and auto-selection options.

    Args:
        exclude_outliers_default: UI hint to hide outliers by default.
        ai_narrative: Narrative mode derived from the syntax.
        ai_selection_keys: Chart keys selected by the auto-selector.
        ai_narratives: Chart key -> generated reason/solution text.
        ai_selection_summary: Optional summary of the selection.
        ai_session_summary: Optional session narrative.
        ai_preset: Preset bounding how many charts are selected.
        ai_syntax: Narrative syntax ("global" produces one passage).
        ai_answers: Coach questionnaire answers forwarded to the narrator.
        ai_context: Free-form context forwarded to the narrator.
    """

    exclude_outliers_default: bool = False
    ai_narrative: NarrativeMode | None = None
    ai_selection_keys: tuple[str, ...] = ()
    ai_narratives: dict[str, dict[str, str | None]] = field(default_factory=dict)
    ai_selection_summary: str | None = None
    ai_session_summary: str | None = None
    ai_preset: str | None = None
    ai_syntax: str | None = None
    ai_answers: dict[str, str | list[str]] | None = None
    ai_context: str | None = None


@dataclass(frozen=True)
class RadarConfig:
    """Radar report configuration.

    Args:
        mode: "default", "custom" or "ai" (set by the auto-selector).
        show_summary: Whether the session summary is rendered.
        show_table: Whether the raw shot table is rendered.
        show_segments: Whether segment tables are rendered.
        charts: Chart key -> enabled flag, in display order.
        thresholds: Numeric thresholds for the engine.
        options: Narrative and auto-selection options.
    """

    mode: ConfigMode = "default"
    show_summary: bool = True
    show_table: bool = True
    show_segments: bool = True
    charts: dict[str, bool] = field(default_factory=dict)
    thresholds: RadarThresholds = field(default_factory=RadarThresholds)
    options: RadarOptions = field(default_factory=RadarOptions)


def _default_charts() -> dict[str, bool]:
    """Enable the base charts and list every registry chart as disabled."""

    from .charts.registry import DEFAULT_CHART_REGISTRY

    charts = {key: True for key in BASE_CHART_KEYS}
    for definition in DEFAULT_CHART_REGISTRY.list():
        charts.setdefault(definition.key, False)
    return charts


def default_radar_config() -> RadarConfig:
    """Return a fresh default configuration."""

    return RadarConfig(charts=_default_charts())


def encode_radar_config(config: RadarConfig) -> dict[str, Any]:
    """Encode a RadarConfig into its camelCase JSON shape.

    Args:
        config: RadarConfig to encode.

    Returns:
        JSON-serializable dictionary.
    """

    thresholds = config.thresholds
    options = config.options
    return {
        "mode": config.mode,
        "showSummary": config.show_summary,
        "showTable": config.show_table,
        "showSegments": config.show_segments,
        "charts": dict(config.charts),
        "thresholds": {
            "latCorridorMeters": list(thresholds.lat_corridor),
            "distCorridorMeters": list(thresholds.dist_corridor),
            "impactCenterBox": {
                "lat": thresholds.impact_center_box.lat,
                "vert": thresholds.impact_center_box.vert,
            },
            "outlierMethod": thresholds.outlier_method,
            "outlierMetrics": list(thresholds.outlier_metrics),
            "bins": {"quantiles": list(thresholds.bin_quantiles)},
        },
        "options": {
            "excludeOutliersDefault": options.exclude_outliers_default,
            "aiNarrative": options.ai_narrative,
            "aiSelectionKeys": list(options.ai_selection_keys),
            "aiNarratives": dict(options.ai_narratives),
            "aiSelectionSummary": options.ai_selection_summary,
            "aiSessionSummary": options.ai_session_summary,
            "aiPreset": options.ai_preset,
            "aiSyntax": options.ai_syntax,
            "aiAnswers": options.ai_answers,
            "aiContext": options.ai_context,
        },
    }


def decode_radar_config(payload: dict[str, Any] | None) -> RadarConfig:
    """Decode a RadarConfig from a stored payload.

    Decoding is best-effort: unknown keys are ignored and invalid values fall
    back to their defaults.

    Args:
        payload: Dictionary previously produced by `encode_radar_config` (or
            written by hand in the same shape). None yields the default config.

    Returns:
        RadarConfig instance.
    """

    if not isinstance(payload, dict):
        return default_radar_config()

    defaults = RadarThresholds()
    thresholds_raw = _as_dict(payload.get("thresholds"))
    box_raw = _as_dict(thresholds_raw.get("impactCenterBox"))
    bins_raw = _as_dict(thresholds_raw.get("bins"))
    method = thresholds_raw.get("outlierMethod")
    metrics_raw = thresholds_raw.get("outlierMetrics")
    thresholds = RadarThresholds(
        lat_corridor=_parse_pair(thresholds_raw.get("latCorridorMeters"), default=defaults.lat_corridor),
        dist_corridor=_parse_pair(thresholds_raw.get("distCorridorMeters"), default=defaults.dist_corridor),
        impact_center_box=ImpactCenterBox(
            lat=_parse_float(box_raw.get("lat"), default=defaults.impact_center_box.lat),
            vert=_parse_float(box_raw.get("vert"), default=defaults.impact_center_box.vert),
        ),
        outlier_method=cast(OutlierMethod, method) if method in ("iqr", "zrobust") else defaults.outlier_method,
        outlier_metrics=(
            tuple(str(key) for key in metrics_raw) if isinstance(metrics_raw, list) else defaults.outlier_metrics
        ),
        bin_quantiles=_parse_pair(bins_raw.get("quantiles"), default=defaults.bin_quantiles),
    )

    options_raw = _as_dict(payload.get("options"))
    narrative = options_raw.get("aiNarrative")
    narratives_raw = _as_dict(options_raw.get("aiNarratives"))
    answers_raw = options_raw.get("aiAnswers")
    options = RadarOptions(
        exclude_outliers_default=bool(options_raw.get("excludeOutliersDefault", False)),
        ai_narrative=(
            cast(NarrativeMode, narrative) if narrative in ("off", "per-chart", "global") else None
        ),
        ai_selection_keys=tuple(str(key) for key in (options_raw.get("aiSelectionKeys") or ())),
        ai_narratives={str(key): _as_dict(value) for key, value in narratives_raw.items()},
        ai_selection_summary=_parse_str(options_raw.get("aiSelectionSummary")),
        ai_session_summary=_parse_str(options_raw.get("aiSessionSummary")),
        ai_preset=_parse_str(options_raw.get("aiPreset")),
        ai_syntax=_parse_str(options_raw.get("aiSyntax")),
        ai_answers=answers_raw if isinstance(answers_raw, dict) else None,
        ai_context=_parse_str(options_raw.get("aiContext")),
    )

    charts_raw = payload.get("charts")
    charts = (
        {str(key): bool(value) for key, value in charts_raw.items()}
        if isinstance(charts_raw, dict)
        else _default_charts()
    )
    mode = payload.get("mode")
    return RadarConfig(
        mode=cast(ConfigMode, mode) if mode in ("default", "custom", "ai") else "default",
        show_summary=bool(payload.get("showSummary", True)),
        show_table=bool(payload.get("showTable", True)),
        show_segments=bool(payload.get("showSegments", True)),
        charts=charts,
        thresholds=thresholds,
        options=options,
    )


def _as_dict(value: object) -> dict[str, Any]:
    """Return `value` when it is a dict, otherwise an empty dict."""

    return value if isinstance(value, dict) else {}


def _parse_float(value: object, *, default: float) -> float:
    """Best-effort float parsing for config payloads."""

    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value))
    except ValueError:
        return default


def _parse_pair(value: object, *, default: tuple[float, float]) -> tuple[float, float]:
    """Parse a two-element numeric list, falling back per element."""

    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return default
    return (
        _parse_float(value[0], default=default[0]),
        _parse_float(value[1], default=default[1]),
    )


def _parse_str(value: object) -> str | None:
    """Return non-empty strings unchanged, otherwise None."""

    if isinstance(value, str) and value:
        return value
    return None
