"""Deterministic chart auto-selection.

The selector scores the six base report charts from global statistics and
every available catalog chart from its payload, then picks a preset-bounded
subset. The resulting RadarConfig drives the narrative generator.

Notes:
    Candidates are sorted with stable sorts only, so ties keep base-list order
    followed by chart-registry declaration order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Final

from .charts.insights import pearson_r
from .charts.payloads import (
    ChartPayload,
    HistPayload,
    LinePayload,
    MatrixPayload,
    ScatterPayload,
    TablePayload,
)
from .config import DEFAULT_PRESET, DEFAULT_SYNTAX, RadarConfig, default_radar_config
from .dto import RadarAnalytics

logger = logging.getLogger(__name__)

SELECTION_THRESHOLD: Final[float] = 0.45
FOCUS_BOOST: Final[float] = 0.2
IDEAL_SMASH: Final[float] = 1.48


@dataclass(frozen=True)
class PresetBounds:
    """How many charts a preset selects."""

    min_total: int
    max_total: int
    min_base: int


PRESETS: Final[dict[str, PresetBounds]] = {
    "ultra": PresetBounds(min_total=1, max_total=2, min_base=1),
    "synthetic": PresetBounds(min_total=1, max_total=4, min_base=1),
    "standard": PresetBounds(min_total=3, max_total=6, min_base=2),
    "pousse": PresetBounds(min_total=4, max_total=10, min_base=4),
    "complet": PresetBounds(min_total=5, max_total=10, min_base=6),
}

FOCUS_TOKENS: Final[dict[str, tuple[str, ...]]] = {
    "precision": ("dispersion", "lateral", "path", "curve", "face_path"),
    "distance": ("carry", "total", "speed", "smash", "launch", "height"),
    "contact": ("smash", "impact", "face", "spin_loft"),
    "trajectoire": ("launch", "spin", "height", "descent"),
    "regularite": ("time", "stability", "consistency"),
}


@dataclass(frozen=True)
class ScoredCandidate:
    """A chart candidate with its interest score in [0, 1.2]."""

    key: str
    score: float
    is_base: bool = False


@dataclass(frozen=True)
class AutoSelection:
    """Result of the chart auto-selection.

    Attributes:
        keys: Enabled chart keys, in chart order.
        charts: Chart key -> enabled flag (pre-seeded keys first).
        candidates: Every candidate sorted by descending score.
        preset: Resolved preset name.
        narrative: "global" or "per-chart".
    """

    keys: tuple[str, ...]
    charts: dict[str, bool]
    candidates: tuple[ScoredCandidate, ...]
    preset: str
    narrative: str


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def resolve_preset(name: str | None) -> tuple[str, PresetBounds]:
    """Return the preset name and bounds, defaulting to "standard"."""

    if name and name in PRESETS:
        return name, PRESETS[name]
    return DEFAULT_PRESET, PRESETS[DEFAULT_PRESET]


def focus_boost(token: str, focus: str | None) -> float:
    """Return the focus bonus for a candidate token.

    The focus category matches exactly (case-insensitive) or when the focus
    text contains a category label.
    """

    if not focus:
        return 0.0
    normalized = focus.lower()
    tokens = FOCUS_TOKENS.get(normalized)
    if tokens is None:
        tokens = next((values for label, values in FOCUS_TOKENS.items() if label in normalized), None)
    if tokens is None:
        return 0.0
    return FOCUS_BOOST if any(candidate in token for candidate in tokens) else 0.0


def score_payload(payload: ChartPayload) -> float:
    """Score how informative a chart payload is.

    Args:
        payload: Built chart payload.

    Returns:
        Score in [0, 1].
    """

    if isinstance(payload, ScatterPayload):
        r = pearson_r([(point.x, point.y) for point in payload.points])
        correlation = 0.25 if r is None else _clamp(abs(r))
        density = _clamp((len(payload.points) - 6) / 24, 0.0, 0.35)
        return _clamp(correlation + density)
    if isinstance(payload, LinePayload):
        if not payload.series or len(payload.series[0].values) < 3:
            return 0.2
        values = payload.series[0].values
        avg = sum(values) / len(values)
        return _clamp(abs(max(values) - min(values)) / (abs(avg) + 1))
    if isinstance(payload, HistPayload):
        total = sum(bin_.count for bin_ in payload.bins)
        if not total:
            return 0.2
        return _clamp(1 - max(bin_.count for bin_ in payload.bins) / total)
    if isinstance(payload, TablePayload):
        return 0.35 if payload.rows else 0.2
    if isinstance(payload, MatrixPayload):
        if not payload.variables:
            return 0.2
        best = 0.0
        for i, row in enumerate(payload.matrix):
            for j, value in enumerate(row):
                if i != j:
                    best = max(best, abs(value))
        return _clamp(best)
    return _clamp(payload.model.r2 or 0.0)


def _stat(analytics: RadarAnalytics, key: str, attribute: str) -> float | None:
    stat = analytics.global_stats.get(key)
    if stat is None:
        return None
    return getattr(stat, attribute)


def score_base_charts(analytics: RadarAnalytics, focus: str | None = None) -> list[ScoredCandidate]:
    """Score the base report charts that the session data supports.

    Args:
        analytics: Computed analytics artifact.
        focus: Optional coaching focus category.

    Returns:
        Base candidates in fixed base-chart order.
    """

    def has(key: str) -> bool:
        return _stat(analytics, key, "mean") is not None

    candidates: list[ScoredCandidate] = []

    if has("lateral") and (has("carry") or has("total")):
        within = analytics.derived.corridors.within_lat10
        lat_std = _stat(analytics, "lateral", "std")
        if within is not None:
            score = _clamp(1 - within / 100)
        elif lat_std is not None:
            score = _clamp(lat_std / 12)
        else:
            score = 0.35
        candidates.append(ScoredCandidate("dispersion", score + focus_boost("dispersion", focus), True))

    if has("carry") and has("total"):
        carry = _stat(analytics, "carry", "mean") or 0.0
        total = _stat(analytics, "total", "mean") or 0.0
        score = _clamp(abs(total - carry) / max(1.0, abs(carry)) * 3)
        candidates.append(ScoredCandidate("carryTotal", score + focus_boost("carry", focus), True))

    if has("club_speed") or has("ball_speed"):
        smash = _stat(analytics, "smash", "mean")
        score = _clamp(abs(IDEAL_SMASH - smash) / 0.2) if smash is not None else 0.3
        candidates.append(ScoredCandidate("speeds", score + focus_boost("speed", focus), True))

    if has("spin_rpm") and (has("carry") or has("total")):
        spin_mean = _stat(analytics, "spin_rpm", "mean")
        spin_std = _stat(analytics, "spin_rpm", "std")
        if spin_mean is not None and spin_std is not None:
            score = _clamp(spin_std / max(1.0, spin_mean) * 2)
        else:
            score = 0.25
        candidates.append(ScoredCandidate("spinCarry", score + focus_boost("spin", focus), True))

    if has("smash"):
        smash_cv = _stat(analytics, "smash", "cv")
        score = _clamp(smash_cv / 0.05) if smash_cv is not None else 0.25
        candidates.append(ScoredCandidate("smash", score + focus_boost("smash", focus), True))

    if has("impact_lat") and has("impact_vert"):
        lat = _stat(analytics, "impact_lat", "mean") or 0.0
        vert = _stat(analytics, "impact_vert", "mean") or 0.0
        score = _clamp(math.sqrt(lat**2 + vert**2) / 0.4)
        candidates.append(ScoredCandidate("faceImpact", score + focus_boost("impact", focus), True))

    return candidates


def score_advanced_charts(analytics: RadarAnalytics, focus: str | None = None) -> list[ScoredCandidate]:
    """Score every available catalog chart, sorted by descending score."""

    scored = [
        ScoredCandidate(key, score_payload(data.payload) + focus_boost(key, focus))
        for key, data in analytics.charts_data.items()
        if data.available and data.payload is not None
    ]
    return sorted(scored, key=lambda candidate: -candidate.score)


def select_charts(
    analytics: RadarAnalytics,
    *,
    chart_keys: tuple[str, ...] = (),
    preset: str | None = None,
    syntax: str | None = None,
    focus: str | None = None,
) -> AutoSelection:
    """Select which charts to render for a session.

    Args:
        analytics: Computed analytics artifact.
        chart_keys: Keys pre-seeded as disabled (fixes the output order).
        preset: Preset name bounding the selection size.
        syntax: Narrative syntax; "global" yields a single narrative.
        focus: Optional coaching focus category.

    Returns:
        AutoSelection with the enabled keys and scored candidates.
    """

    base = score_base_charts(analytics, focus)
    advanced = score_advanced_charts(analytics, focus)
    candidates = sorted([*base, *advanced], key=lambda candidate: -candidate.score)
    base_ranked = sorted(base, key=lambda candidate: -candidate.score)

    preset_name, bounds = resolve_preset(preset)
    max_total = min(bounds.max_total, len(candidates))
    min_total = min(bounds.min_total, len(candidates))
    min_base = min(bounds.min_base, len(base_ranked))

    charts = {key: False for key in chart_keys}
    initial = base_ranked if preset_name == "complet" else base_ranked[:min_base]
    for candidate in initial:
        charts[candidate.key] = True

    preferred = [candidate for candidate in candidates if candidate.score >= SELECTION_THRESHOLD]
    enabled = sum(charts.values())
    desired = min(max_total, max(min_total, max(enabled, len(preferred))))
    for candidate in preferred or candidates:
        if enabled >= desired:
            break
        if not charts.get(candidate.key):
            charts[candidate.key] = True
            enabled += 1

    keys = tuple(key for key, is_enabled in charts.items() if is_enabled)
    narrative = "global" if (syntax or DEFAULT_SYNTAX) == "global" else "per-chart"
    logger.debug(
        "Auto-selected %d chart(s) with preset=%s from %d candidate(s): %s",
        len(keys),
        preset_name,
        len(candidates),
        ", ".join(keys),
    )
    return AutoSelection(
        keys=keys,
        charts=charts,
        candidates=tuple(candidates),
        preset=preset_name,
        narrative=narrative,
    )


def build_auto_radar_config(
    analytics: RadarAnalytics,
    base_config: RadarConfig | None = None,
    *,
    preset: str | None = None,
    syntax: str | None = None,
    focus: str | None = None,
    answers: dict[str, str | list[str]] | None = None,
    context: str | None = None,
) -> RadarConfig:
    """Return a new "ai" RadarConfig enabling the auto-selected charts.

    Args:
        analytics: Computed analytics artifact.
        base_config: Config to derive from (never mutated). Defaults to the
            default config.
        preset: Preset override; falls back to the base config's preset.
        syntax: Narrative syntax override; falls back to the base config's.
        focus: Optional coaching focus category.
        answers: Coach questionnaire answers forwarded to the narrator.
        context: Free-form context forwarded to the narrator.

    Returns:
        RadarConfig with mode "ai", summary only, and the selection stored in
        its options.
    """

    base = base_config or default_radar_config()
    options = base.options
    chosen_preset = preset or options.ai_preset
    chosen_syntax = syntax or options.ai_syntax or DEFAULT_SYNTAX
    selection = select_charts(
        analytics,
        chart_keys=tuple(base.charts.keys()),
        preset=chosen_preset,
        syntax=chosen_syntax,
        focus=focus,
    )
    return replace(
        base,
        mode="ai",
        show_summary=True,
        show_table=False,
        show_segments=False,
        charts=selection.charts,
        options=replace(
            options,
            ai_narrative=selection.narrative,
            ai_selection_keys=selection.keys,
            ai_preset=chosen_preset or DEFAULT_PRESET,
            ai_syntax=chosen_syntax,
            ai_answers=answers if answers is not None else options.ai_answers,
            ai_context=context if context is not None else options.ai_context,
        ),
    )
