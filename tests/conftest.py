"""Pytest fixtures shared across the radar analytics suite."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from analysis.dto import EnrichedShot, NormalizedShot, RadarColumn

SESSION_COLUMNS: tuple[tuple[str, str, str | None], ...] = (
    ("shot_index", "Shot #", None),
    ("shot_type", "Type", None),
    ("carry", "Carry", "m"),
    ("total", "Total", "m"),
    ("lateral", "Lateral", "m"),
    ("club_speed", "Club Speed", "km/h"),
    ("ball_speed", "Ball Speed", "km/h"),
    ("spin_rpm", "Spin", "rpm"),
    ("smash", "Smash Factor", None),
    ("launch_v", "Launch V", "°"),
    ("launch_h", "Launch H", "°"),
    ("spin_axis", "Spin Axis", "°"),
    ("ftp", "FTP", "°"),
    ("impact_lat", "Impact Lateral", "mm"),
    ("impact_vert", "Impact Vertical", "mm"),
)

# shot, type, carry, total, lateral, club, ball, spin, smash, launch V/H, axis, ftp, impact lat/vert
SESSION_ROWS: tuple[tuple[Any, ...], ...] = (
    (1, "Draw", "150,5", 162, "5L", 140, 200, 5200, 1.43, 16.1, -1.2, "3.0L", -1.5, 0.1, 0.2),
    (2, "Fade", 148.0, 159, "3.5R", 138, 197, 5400, 1.43, 15.2, 1.4, 2.5, 2.1, 0.5, -0.3),
    (3, "Draw", 155.2, 166, "8L", 142, 205, 5100, 1.44, 16.8, -2.0, -4.2, -2.3, -0.6, 0.1),
    (4, "Fade", 146.3, 157, 2.0, 137, 194, 5600, 1.42, 14.9, 0.8, 1.9, 1.0, 0.2, -0.5),
    (5, "Draw", 151.8, 163, "6,5L", 141, 202, 5300, 1.43, 16.0, -1.6, -3.5, -1.8, -0.3, 0.4),
    (6, "Draw", 138.4, 149, "12L", 135, 186, 6100, 1.38, 13.7, -3.1, -6.0, -3.4, -0.9, -0.7),
    (7, "Fade", 149.9, 161, "4R", 139, 199, 5250, 1.43, 15.6, 1.1, 2.8, 1.7, 0.4, 0.0),
    (8, "Draw", 153.1, 165, "1L", 141, 203, 5150, 1.44, 16.4, -0.4, -1.1, -0.5, 0.0, 0.3),
    (9, "Fade", 147.6, 158, "9R", 138, 196, 5500, 1.42, 15.0, 2.2, 4.4, 2.6, 0.7, -0.2),
    (10, "Draw", 152.4, 164, "2,5L", 140, 201, 5350, 1.44, 16.2, -0.9, -2.0, -1.0, -0.1, 0.2),
    (11, "Fade", 150.2, 161, "-", 139, 199, 5280, 1.43, 15.8, 0.5, "", 0.6, 0.3, -0.1),
    (12, "Draw", 154.0, 165, "7L", 142, 204, 5180, 1.44, 16.6, -1.8, -3.9, -2.0, -0.4, 0.5),
    ("Avg", None, 149.8, 161, "2L", 140, 199, 5370, 1.43, 15.7, -0.4, -0.9, -0.4, 0.0, 0.0),
    ("Dev", None, 4.4, 4.5, "5.8", 2, 5, 260, 0.02, 0.9, 1.6, 3.3, 1.9, 0.5, 0.35),
)


@pytest.fixture
def radar_columns() -> tuple[RadarColumn, ...]:
    """Return the export columns of a 12-shot 7-iron session."""

    return tuple(RadarColumn(key=key, label=label, unit=unit) for key, label, unit in SESSION_COLUMNS)


@pytest.fixture
def radar_shots() -> list[dict[str, Any]]:
    """Return raw rows (including vendor Avg/Dev rows) keyed by column key."""

    keys = [key for key, _label, _unit in SESSION_COLUMNS]
    return [dict(zip(keys, row)) for row in SESSION_ROWS]


@pytest.fixture
def radar_payload(radar_columns, radar_shots) -> dict[str, Any]:
    """Return the `{columns, shots}` export table as decoded JSON."""

    return {
        "columns": [
            {"key": column.key, "label": column.label, "unit": column.unit} for column in radar_columns
        ],
        "shots": radar_shots,
        "metadata": {"club": "Fer 7 / 7 Iron", "ball": "Pro V1"},
    }


def make_shots(values: Sequence[dict[str, float]], **attributes: Sequence[Any]) -> tuple[EnrichedShot, ...]:
    """Build enriched shots numbered from 1 with raw canonical values.

    Keyword arguments map an EnrichedShot derived attribute (e.g. `left_right`)
    or `shot_type` to one value per shot.
    """

    shots: list[EnrichedShot] = []
    for position, row in enumerate(values):
        shot_type = attributes.get("shot_type", [None] * len(values))[position]
        derived = {key: column[position] for key, column in attributes.items() if key != "shot_type"}
        shots.append(
            EnrichedShot(
                shot=NormalizedShot(shot_index=position + 1, shot_type=shot_type, values=dict(row)),
                **derived,
            )
        )
    return tuple(shots)


@pytest.fixture
def shot_factory():
    """Return the `make_shots` helper for hand-built enriched shots."""

    return make_shots


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests against the analysis package.
    - `integration`: tests touching Django settings, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
