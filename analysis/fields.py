"""Canonical launch-monitor field definitions.

CanonicalField is the vendor-independent vocabulary every export table is
mapped onto. The ordered tuples below fix which fields feed each stage of the
analytics pipeline; their order is part of the artifact contract.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class CanonicalField(StrEnum):
    """Semantic shot metric name.

    Declaration order is the column-mapping resolution order.
    """

    shot_index = "shot_index"
    shot_type = "shot_type"
    carry = "carry"
    total = "total"
    roll = "roll"
    lateral = "lateral"
    curve = "curve"
    club_speed = "club_speed"
    ball_speed = "ball_speed"
    spin_rpm = "spin_rpm"
    spin_axis = "spin_axis"
    spin_loft = "spin_loft"
    smash = "smash"
    launch_v = "launch_v"
    launch_h = "launch_h"
    descent_v = "descent_v"
    height = "height"
    time = "time"
    path = "path"
    ftp = "ftp"
    ftt = "ftt"
    dloft = "dloft"
    aoa = "aoa"
    low_point = "low_point"
    swing_plane_v = "swing_plane_v"
    swing_plane_h = "swing_plane_h"
    impact_lat = "impact_lat"
    impact_vert = "impact_vert"


NUMERIC_FIELDS: Final[tuple[CanonicalField, ...]] = tuple(
    field
    for field in CanonicalField
    if field not in (CanonicalField.shot_index, CanonicalField.shot_type)
)

STAT_KEYS: Final[tuple[str, ...]] = (
    "carry",
    "total",
    "roll",
    "lateral",
    "curve",
    "club_speed",
    "ball_speed",
    "spin_rpm",
    "smash",
    "launch_v",
    "launch_h",
    "descent_v",
    "height",
    "time",
    "path",
    "ftp",
    "aoa",
    "low_point",
    "spin_axis",
    "spin_loft",
    "impact_lat",
    "impact_vert",
)

CORRELATION_KEYS: Final[tuple[str, ...]] = (
    "carry",
    "total",
    "roll",
    "lateral",
    "club_speed",
    "ball_speed",
    "spin_rpm",
    "smash",
    "launch_v",
    "launch_h",
    "path",
    "ftp",
    "aoa",
    "spin_axis",
    "impact_lat",
    "impact_vert",
)

DEFAULT_OUTLIER_METRICS: Final[tuple[str, ...]] = ("carry", "lateral", "smash", "ball_speed")
