"""Compute radar analytics for an exported launch-monitor session."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from analysis.auto_config import build_auto_radar_config
from analysis.codec import decode_radar_columns, decode_radar_shots, encode_radar_analytics
from analysis.config import RadarConfig, decode_radar_config, encode_radar_config
from analysis.engine import compute_analytics

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Read a `{columns, shots, metadata?}` JSON table and print the artifact."""

    help = "Compute the radar analytics artifact (and optionally the auto chart selection) for a session file."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("input", help="Path to a JSON file with `columns`, `shots` and optional `metadata`.")
        parser.add_argument(
            "--config",
            default=None,
            help="Optional RadarConfig file (YAML or JSON).",
        )
        parser.add_argument(
            "--output",
            default=None,
            help="Write the JSON result to this path instead of stdout.",
        )
        parser.add_argument(
            "--select",
            action="store_true",
            help="Also run the chart auto-selection and include the resulting config.",
        )
        parser.add_argument("--preset", default=None, help="Selection preset (ultra, synthetic, standard, pousse, complet).")
        parser.add_argument("--syntax", default=None, help="Narrative syntax (e.g. exp-tech-solution, global).")
        parser.add_argument("--focus", default=None, help="Optional coaching focus (precision, distance, contact, ...).")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        table = _load_json_object(Path(options["input"]))
        config = _load_config(options["config"])
        metadata = table.get("metadata")

        analytics = compute_analytics(
            decode_radar_columns(table.get("columns")),
            decode_radar_shots(table.get("shots")),
            config=config,
            metadata=metadata if isinstance(metadata, dict) else None,
        )
        result: dict[str, Any] = encode_radar_analytics(analytics)

        if options["select"]:
            selected = build_auto_radar_config(
                analytics,
                config,
                preset=options["preset"] or getattr(settings, "RADAR_DEFAULT_PRESET", None),
                syntax=options["syntax"] or getattr(settings, "RADAR_DEFAULT_SYNTAX", None),
                focus=options["focus"],
            )
            result = {"analytics": result, "selection": encode_radar_config(selected)}
            logger.info(
                "Selected %d chart(s) for %s.",
                len(selected.options.ai_selection_keys),
                options["input"],
            )

        rendered = json.dumps(result, ensure_ascii=False, indent=2)
        output = options["output"]
        if output:
            try:
                Path(output).write_text(rendered + "\n", encoding="utf-8")
            except OSError as exc:
                raise CommandError(f"Cannot write {output}: {exc}") from exc
            self.stdout.write(f"Wrote radar analytics to {output}")
        else:
            self.stdout.write(rendered)
        return None


def _load_json_object(path: Path) -> dict[str, Any]:
    """Read a JSON file that must contain an object."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CommandError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CommandError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CommandError(f"{path} must contain a JSON object with `columns` and `shots`.")
    return payload


def _load_config(path: str | None) -> RadarConfig | None:
    """Load a RadarConfig from YAML/JSON, or None when no path is given."""

    if path is None:
        return None
    try:
        payload = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise CommandError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CommandError(f"Invalid config in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CommandError(f"{path} must contain a mapping.")
    return decode_radar_config(payload)
