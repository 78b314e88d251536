"""Fuzzy binding of vendor export columns to canonical fields.

Launch monitors name the same measurement differently ("Carry", "Distance
Carry", "distance_carry"). Each canonical field owns an ordered alias list
(specific -> generic); a column binds to a field when its normalized
key/group/label text contains one of the normalized aliases.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from typing import Final

from .dto import RadarColumn
from .fields import CanonicalField

ColumnMap = dict[CanonicalField, RadarColumn]

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

COLUMN_ALIASES: Final[dict[CanonicalField, tuple[str, ...]]] = {
    CanonicalField.shot_index: ("shot_index", "shot #", "shot", "shot number", "#"),
    CanonicalField.shot_type: ("shot_type", "shot type", "type"),
    CanonicalField.carry: ("distance_carry", "carry"),
    CanonicalField.total: ("distance_total", "total"),
    CanonicalField.roll: ("distance_roll", "roll"),
    CanonicalField.lateral: ("distance_lateral", "lateral", "side", "sideways"),
    CanonicalField.curve: ("distance_curve", "curve dist", "curve"),
    CanonicalField.club_speed: ("speed_club", "club speed", "club mph", "club"),
    CanonicalField.ball_speed: ("speed_ball", "ball speed", "ball mph", "ball"),
    CanonicalField.spin_rpm: ("spin_rpm", "rpm", "spin"),
    CanonicalField.spin_axis: ("spin_axis", "spin axis", "axis"),
    CanonicalField.spin_loft: ("spin_loft", "spin loft"),
    CanonicalField.smash: ("smash_factor", "smash", "factor"),
    CanonicalField.launch_v: ("ball_angle_vertical", "launch v", "launch vertical", "vertical"),
    CanonicalField.launch_h: ("ball_angle_horizontal", "launch h", "launch horizontal", "horizontal"),
    CanonicalField.descent_v: ("ball_angle_descent", "descent v", "descent"),
    CanonicalField.height: ("flight_height", "height"),
    CanonicalField.time: ("flight_time", "time"),
    CanonicalField.path: ("club_path", "path"),
    CanonicalField.ftp: ("club_face_to_path", "ftp", "face to path"),
    CanonicalField.ftt: ("club_face_to_target", "ftt", "face to target"),
    CanonicalField.dloft: ("club_dynamic_loft", "d loft", "dynamic loft"),
    CanonicalField.aoa: ("club_aoa", "aoa", "angle of attack"),
    CanonicalField.low_point: ("club_low_point", "low point"),
    CanonicalField.swing_plane_v: ("swing_plane_vertical", "swing plane vertical"),
    CanonicalField.swing_plane_h: ("swing_plane_horizontal", "swing plane horizontal"),
    CanonicalField.impact_lat: (
        "face_impact_lateral",
        "impact_face_lateral",
        "face impact lateral",
        "impact face lateral",
        "impact lateral",
        "impact x",
    ),
    CanonicalField.impact_vert: (
        "face_impact_vertical",
        "impact_face_vertical",
        "impact vertical",
        "impact y",
        "face impact vertical",
        "impact face vertical",
    ),
}


def normalize_token(value: str) -> str:
    """Normalize text for alias matching.

    Lowercases, strips diacritics, and collapses every run of
    non-alphanumeric characters into a single space.

    Args:
        value: Raw column key, group or label.

    Returns:
        The normalized, trimmed token string.
    """

    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub(" ", stripped).strip()


def column_tokens(column: RadarColumn) -> str:
    """Return the searchable `"<key> <group> <label>"` text for a column."""

    key = normalize_token(column.key or "")
    group = normalize_token(column.group or "")
    label = normalize_token(column.label or "")
    return f"{key} {group} {label}".strip()


def build_column_map(columns: Iterable[RadarColumn]) -> ColumnMap:
    """Bind export columns to canonical fields.

    Fields are resolved in `CanonicalField` declaration order and columns are
    scanned in input order; the first matching column wins. Fields are
    resolved independently, so a single column may be bound to several fields.

    Args:
        columns: Export table columns in source order.

    Returns:
        Partial mapping of canonical field -> bound column.
    """

    tokens = [(column, column_tokens(column)) for column in columns]
    mapping: ColumnMap = {}
    for canonical in CanonicalField:
        patterns = [normalize_token(alias) for alias in COLUMN_ALIASES[canonical]]
        for column, text in tokens:
            if any(pattern in text for pattern in patterns):
                mapping[canonical] = column
                break
    return mapping


def column_units(mapping: ColumnMap) -> dict[str, str | None]:
    """Return field -> unit for every bound field, in resolution order."""

    return {str(canonical): column.unit for canonical, column in mapping.items()}


def get_unit(mapping: ColumnMap, field: CanonicalField) -> str | None:
    """Return the unit of the column bound to `field`, if any."""

    column = mapping.get(field)
    return column.unit if column is not None else None
