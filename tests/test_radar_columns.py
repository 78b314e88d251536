"""Unit tests for binding export columns to canonical fields."""

from __future__ import annotations

import pytest

from analysis.columns import build_column_map, column_units, get_unit, normalize_token
from analysis.dto import RadarColumn
from analysis.fields import CanonicalField

pytestmark = pytest.mark.unit


def test_normalize_token_strips_accents_and_punctuation() -> None:
    """Normalization lowercases, drops diacritics and collapses separators."""

    assert normalize_token("Vitesse_Balle (km/h)") == "vitesse balle km h"
    assert normalize_token("  Écart latéral ") == "ecart lateral"


def test_build_column_map_binds_reference_session(radar_columns) -> None:
    """Every column of the reference export binds to its canonical field."""

    mapping = build_column_map(radar_columns)

    assert mapping[CanonicalField.carry].key == "carry"
    assert mapping[CanonicalField.lateral].key == "lateral"
    assert mapping[CanonicalField.spin_rpm].key == "spin_rpm"
    assert mapping[CanonicalField.spin_axis].key == "spin_axis"
    assert mapping[CanonicalField.launch_v].key == "launch_v"
    assert mapping[CanonicalField.impact_lat].key == "impact_lat"
    assert mapping[CanonicalField.impact_vert].key == "impact_vert"
    assert CanonicalField.roll not in mapping
    assert CanonicalField.path not in mapping


def test_build_column_map_matches_group_and_label_text() -> None:
    """Vendor keys that say nothing still bind through group and label."""

    columns = [
        RadarColumn(key="c1", label="Carry", group="Distance"),
        RadarColumn(key="c2", label="Roll", group="Distance"),
    ]

    mapping = build_column_map(columns)

    assert mapping[CanonicalField.carry].key == "c1"
    assert mapping[CanonicalField.roll].key == "c2"


def test_build_column_map_first_matching_column_wins() -> None:
    """Columns are scanned in input order and the first match is kept."""

    columns = [
        RadarColumn(key="a", label="Carry (yards)"),
        RadarColumn(key="b", label="Carry (meters)"),
    ]

    mapping = build_column_map(columns)

    assert mapping[CanonicalField.carry].key == "a"


def test_build_column_map_allows_one_column_for_several_fields() -> None:
    """A generic column may satisfy more than one field."""

    columns = [RadarColumn(key="face_path", label="Face to path", unit="deg")]

    mapping = build_column_map(columns)

    assert mapping[CanonicalField.ftp].key == "face_path"
    assert mapping[CanonicalField.path].key == "face_path"


def test_column_units_propagate_verbatim(radar_columns) -> None:
    """Units are copied from the bound column without conversion."""

    mapping = build_column_map(radar_columns)
    units = column_units(mapping)

    assert units["carry"] == "m"
    assert units["ball_speed"] == "km/h"
    assert units["smash"] is None
    assert get_unit(mapping, CanonicalField.launch_v) == "°"
    assert get_unit(mapping, CanonicalField.roll) is None
