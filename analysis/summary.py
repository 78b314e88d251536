"""Session summary sentence and headline insights for the base charts."""

from __future__ import annotations

from collections.abc import Mapping

from .charts.insights import format_value, js_round, number_text, to_fixed
from .dto import CorridorSummary, SummaryStat

PART_SEPARATOR = " · "


def build_summary(global_stats: Mapping[str, SummaryStat], carry_target: float | None) -> str | None:
    """Build the one-line session summary.

    Args:
        global_stats: Global statistics keyed by metric.
        carry_target: Session carry target.

    Returns:
        Summary text, or None without carry data.
    """

    carry = global_stats.get("carry")
    if carry is None or carry.count == 0:
        return None
    pieces: list[str] = []
    if carry_target:
        pieces.append(f"Carry moyen cible {to_fixed(carry_target, 1)}.")
    if carry.mean and carry.std:
        consistency = js_round(carry.std / abs(carry.mean) * 100, 1)
        if consistency:
            pieces.append(f"Regularite carry (CV) {number_text(consistency)}% .")
    return " ".join(pieces) or None


def _mean(global_stats: Mapping[str, SummaryStat], key: str) -> float | None:
    stat = global_stats.get(key)
    return stat.mean if stat is not None else None


def _join(parts: list[str | None]) -> str | None:
    present = [part for part in parts if part]
    return PART_SEPARATOR.join(present) if present else None


def build_insights(
    global_stats: Mapping[str, SummaryStat],
    units: Mapping[str, str | None],
    corridors: CorridorSummary,
    *,
    lat_corridor: float = 10.0,
) -> dict[str, str]:
    """Build the headline strings shown above each base chart.

    Args:
        global_stats: Global statistics keyed by metric.
        units: Units map of bound fields.
        corridors: Session corridor shares.
        lat_corridor: Upper lateral corridor bound used in the dispersion text.

    Returns:
        Base chart key -> headline. Keys without any data are omitted.
    """

    def stat(key: str, attribute: str) -> float | None:
        value = global_stats.get(key)
        return getattr(value, attribute) if value is not None else None

    def text(label: str, value: float | None, unit: str | None, digits: int = 1) -> str | None:
        return f"{label} {format_value(value, unit, digits)}" if value is not None else None

    lateral_unit = units.get("lateral")
    distance_unit = units.get("total") or units.get("carry")
    carry_mean = _mean(global_stats, "carry")
    total_mean = _mean(global_stats, "total")
    club_mean = _mean(global_stats, "club_speed")
    ball_mean = _mean(global_stats, "ball_speed")
    smash_mean = _mean(global_stats, "smash")

    within = corridors.within_lat10
    corridor_text = None
    if within is not None:
        suffix = f" {lateral_unit}" if lateral_unit else "m"
        corridor_text = f"{number_text(within)}% des coups dans ±{number_text(lat_corridor)}{suffix}"

    roll_mean = total_mean - carry_mean if carry_mean is not None and total_mean is not None else None
    ratio = js_round(ball_mean / club_mean, 2) if club_mean and ball_mean else None

    candidates: dict[str, str | None] = {
        "dispersion": _join(
            [
                text("Moyenne laterale", stat("lateral", "mean"), lateral_unit),
                text("ET", stat("lateral", "std"), lateral_unit),
                corridor_text,
            ]
        ),
        "carryTotal": _join(
            [
                text("Carry moyen", carry_mean, units.get("carry")),
                text("Total moyen", total_mean, distance_unit),
                text("Roll moyen", roll_mean, distance_unit),
            ]
        ),
        "speeds": _join(
            [
                text("Club moy.", club_mean, units.get("club_speed")),
                text("Balle moy.", ball_mean, units.get("ball_speed")),
                text("Smash moy.", smash_mean, units.get("smash"), 2),
                f"Ratio {number_text(ratio)}" if ratio is not None else None,
            ]
        ),
        "spinCarry": _join(
            [
                text("Spin moyen", _mean(global_stats, "spin_rpm"), units.get("spin_rpm"), 0),
                text("Carry moyen", carry_mean, units.get("carry")),
            ]
        ),
        "smash": _join(
            [
                text("Smash moyen", smash_mean, units.get("smash"), 2),
                text("ET", stat("smash", "std"), units.get("smash"), 2),
                text("CV", stat("smash", "cv"), "%", 1),
            ]
        ),
        "faceImpact": _join(
            [
                text("Lat. moy.", _mean(global_stats, "impact_lat"), units.get("impact_lat")),
                text("Vert. moy.", _mean(global_stats, "impact_vert"), units.get("impact_vert")),
            ]
        ),
    }
    return {key: value for key, value in candidates.items() if value is not None}
