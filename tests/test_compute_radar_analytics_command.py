"""Integration tests for the compute_radar_analytics management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


@pytest.fixture
def session_file(tmp_path, radar_payload):
    """Write the reference session to a JSON file."""

    path = tmp_path / "session.json"
    path.write_text(json.dumps(radar_payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_command_prints_analytics_json(session_file) -> None:
    """The artifact is printed as JSON by default."""

    out = StringIO()
    call_command("compute_radar_analytics", str(session_file), stdout=out)

    payload = json.loads(out.getvalue())
    assert payload["meta"]["shotCount"] == 12
    assert payload["meta"]["club"] == "Fer 7 / 7 Iron"
    assert payload["meta"]["benchmark"]["club"] == "7 Iron"
    assert payload["outliers"]["method"] == "iqr"


def test_command_applies_yaml_config_and_writes_output(session_file, tmp_path) -> None:
    """A YAML config drives thresholds and --output writes to disk."""

    config_path = tmp_path / "radar.yaml"
    config_path.write_text(
        "thresholds:\n  outlierMethod: zrobust\n  latCorridorMeters: [2, 4]\n",
        encoding="utf-8",
    )
    output_path = tmp_path / "analytics.json"
    out = StringIO()

    call_command(
        "compute_radar_analytics",
        str(session_file),
        "--config",
        str(config_path),
        "--output",
        str(output_path),
        stdout=out,
    )

    assert f"Wrote radar analytics to {output_path}" in out.getvalue()
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["outliers"]["method"] == "zrobust"
    assert payload["derived"]["corridors"]["withinLat10"] == pytest.approx(45.5)


def test_command_select_includes_auto_config(session_file) -> None:
    """--select wraps the artifact with the auto-selected config."""

    out = StringIO()
    call_command(
        "compute_radar_analytics",
        str(session_file),
        "--select",
        "--preset",
        "ultra",
        "--syntax",
        "global",
        stdout=out,
    )

    payload = json.loads(out.getvalue())
    selection = payload["selection"]
    assert payload["analytics"]["meta"]["shotCount"] == 12
    assert selection["mode"] == "ai"
    assert selection["options"]["aiPreset"] == "ultra"
    assert selection["options"]["aiNarrative"] == "global"
    assert 1 <= len(selection["options"]["aiSelectionKeys"]) <= 2


def test_command_select_uses_settings_defaults(session_file, settings) -> None:
    """Preset and syntax fall back to the project settings."""

    settings.RADAR_DEFAULT_PRESET = "complet"
    settings.RADAR_DEFAULT_SYNTAX = "global"
    out = StringIO()

    call_command("compute_radar_analytics", str(session_file), "--select", stdout=out)

    options = json.loads(out.getvalue())["selection"]["options"]
    assert options["aiPreset"] == "complet"
    assert options["aiSyntax"] == "global"


def test_command_rejects_missing_file(tmp_path) -> None:
    """Unreadable input fails with a CommandError."""

    with pytest.raises(CommandError, match="Cannot read"):
        call_command("compute_radar_analytics", str(tmp_path / "missing.json"), stdout=StringIO())


def test_command_rejects_non_object_json(tmp_path) -> None:
    """The session file must hold a JSON object."""

    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(CommandError, match="must contain a JSON object"):
        call_command("compute_radar_analytics", str(path), stdout=StringIO())


def test_command_rejects_invalid_json(tmp_path) -> None:
    """Malformed JSON is reported instead of crashing."""

    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CommandError, match="Invalid JSON"):
        call_command("compute_radar_analytics", str(path), stdout=StringIO())


def test_command_rejects_non_mapping_config(session_file, tmp_path) -> None:
    """Config files must decode to a mapping."""

    config_path = tmp_path / "radar.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(CommandError, match="must contain a mapping"):
        call_command(
            "compute_radar_analytics",
            str(session_file),
            "--config",
            str(config_path),
            stdout=StringIO(),
        )
