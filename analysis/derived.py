"""Per-shot derived metrics.

Derived fields compare each shot against session-level references: the
carry target (a skew-robust stand-in for the aim distance), quantile bins
computed over the whole session, and the face-impact center box. The module
is pure and defensive: missing inputs produce None fields, never exceptions.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .config import RadarThresholds
from .dto import EnrichedShot, NormalizedShot
from .stats import iqr_fences, mean, median

# Above this share of IQR outliers the mean is considered skewed.
CARRY_OUTLIER_RATIO_LIMIT = 0.10
MIN_CARRY_SAMPLES_FOR_RATIO = 6


def carry_outlier_ratio(values: Sequence[float]) -> float:
    """Return the share of carry values outside the IQR fences.

    Args:
        values: Present carry values.

    Returns:
        Outlier share in [0, 1]; 0 when fewer than 6 values exist.
    """

    if len(values) < MIN_CARRY_SAMPLES_FOR_RATIO:
        return 0.0
    fences = iqr_fences(values)
    if fences is None:
        return 0.0
    lower, upper = fences
    outliers = sum(1 for value in values if value < lower or value > upper)
    return outliers / len(values)


def carry_target(values: Sequence[float]) -> float | None:
    """Estimate the session carry target.

    The median is used when more than 10% of carries are IQR outliers,
    otherwise the mean.

    Args:
        values: Present carry values.

    Returns:
        The carry target, or None when there is no carry data.
    """

    if not values:
        return None
    carry_median = median(values)
    if carry_outlier_ratio(values) > CARRY_OUTLIER_RATIO_LIMIT:
        return carry_median
    carry_mean = mean(values)
    return carry_mean if carry_mean is not None else carry_median


def quantile_cut_points(values: Sequence[float], q1: float, q2: float) -> tuple[float, float]:
    """Return the two bin cut points at sorted indices floor((n-1)*q).

    Args:
        values: Present values for the binned metric.
        q1: Lower quantile.
        q2: Upper quantile.

    Returns:
        `(cut1, cut2)`; `(0, 0)` when `values` is empty.
    """

    if not values:
        return 0.0, 0.0
    ordered = sorted(values)
    i1 = math.floor((len(ordered) - 1) * q1)
    i2 = math.floor((len(ordered) - 1) * q2)
    return ordered[i1], ordered[i2]


def assign_bin(value: float | None, cut_points: tuple[float, float]) -> str | None:
    """Label a value "low", "mid" or "high" against two cut points."""

    if value is None or not math.isfinite(value):
        return None
    if value <= cut_points[0]:
        return "low"
    if value <= cut_points[1]:
        return "mid"
    return "high"


def period_tertile(shot_index: int, shot_count: int) -> str:
    """Place a shot in the "start", "mid" or "end" third of the session.

    Boundaries are inclusive so ties go to the earlier third.
    """

    if shot_index <= shot_count / 3:
        return "start"
    if shot_index <= shot_count * 2 / 3:
        return "mid"
    return "end"


def impact_zone(
    impact_lat: float | None,
    impact_vert: float | None,
    *,
    center_lat: float,
    center_vert: float,
) -> str | None:
    """Classify a face impact as `<lat>-<vert>` (e.g. "toe-high").

    Args:
        impact_lat: Lateral impact offset (positive toward the toe).
        impact_vert: Vertical impact offset (positive toward the crown).
        center_lat: Half-width of the lateral center zone.
        center_vert: Half-width of the vertical center zone.

    Returns:
        Zone label, or None unless both offsets are present.
    """

    if impact_lat is None or impact_vert is None:
        return None
    if abs(impact_lat) <= center_lat:
        lat_zone = "center"
    else:
        lat_zone = "toe" if impact_lat > 0 else "heel"
    if abs(impact_vert) <= center_vert:
        vert_zone = "center"
    else:
        vert_zone = "high" if impact_vert > 0 else "low"
    return f"{lat_zone}-{vert_zone}"


def _present(shots: Sequence[NormalizedShot], key: str) -> list[float]:
    """Collect present values for a canonical key."""

    return [value for shot in shots if (value := shot.get(key)) is not None]


def enrich_shots(
    shots: Sequence[NormalizedShot],
    *,
    thresholds: RadarThresholds,
) -> tuple[tuple[EnrichedShot, ...], float | None]:
    """Compute per-shot derived fields.

    Args:
        shots: Normalized shots in source order.
        thresholds: Bin quantiles and impact center box.

    Returns:
        `(enriched_shots, carry_target)`.
    """

    target = carry_target(_present(shots, "carry"))
    q1, q2 = thresholds.bin_quantiles
    smash_cuts = quantile_cut_points(_present(shots, "smash"), q1, q2)
    ball_cuts = quantile_cut_points(_present(shots, "ball_speed"), q1, q2)
    launch_cuts = quantile_cut_points(_present(shots, "launch_v"), q1, q2)
    ftp_cuts = quantile_cut_points([abs(value) for value in _present(shots, "ftp")], q1, q2)
    box = thresholds.impact_center_box
    shot_count = len(shots)

    enriched: list[EnrichedShot] = []
    for shot in shots:
        carry = shot.get("carry")
        lateral = shot.get("lateral")
        ftp = shot.get("ftp")
        launch_h = shot.get("launch_h")
        spin_axis = shot.get("spin_axis")
        smash = shot.get("smash")
        ball_speed = shot.get("ball_speed")

        distance = carry - target if carry is not None and target is not None else None
        radial = math.sqrt(lateral**2 + distance**2) if lateral is not None and distance is not None else None
        abs_ftp = abs(ftp) if ftp is not None else None

        enriched.append(
            EnrichedShot(
                shot=shot,
                carry_target=target,
                distance_from_target=distance,
                radial_miss=radial,
                abs_lateral=abs(lateral) if lateral is not None else None,
                abs_ftp=abs_ftp,
                abs_launch_h=abs(launch_h) if launch_h is not None else None,
                abs_spin_axis=abs(spin_axis) if spin_axis is not None else None,
                left_right=None if lateral is None else ("L" if lateral < 0 else "R"),
                smash_bin=assign_bin(smash, smash_cuts),
                ball_speed_bin=assign_bin(ball_speed, ball_cuts),
                launch_v_bin=assign_bin(shot.get("launch_v"), launch_cuts),
                abs_ftp_bin=assign_bin(abs_ftp, ftp_cuts),
                period_tertile=period_tertile(shot.shot_index, shot_count),
                impact_zone=impact_zone(
                    shot.get("impact_lat"),
                    shot.get("impact_vert"),
                    center_lat=box.lat,
                    center_vert=box.vert,
                ),
                strike_score=smash if smash is not None else ball_speed,
            )
        )
    return tuple(enriched), target


def derived_units(units: dict[str, str | None]) -> dict[str, str | None]:
    """Extend a units map with the derived distance fields.

    Args:
        units: Canonical field -> unit for bound fields.

    Returns:
        A new map including radial_miss, distance_from_target and abs_lateral.
    """

    extended = dict(units)
    extended["radial_miss"] = units.get("carry")
    extended["distance_from_target"] = units.get("carry")
    extended["abs_lateral"] = units.get("lateral")
    return extended
