#!/usr/bin/env python
"""Command-line entry point for the radarStats management commands."""

from __future__ import annotations

import os
import sys


def main() -> None:
    """Run a management command (e.g. `compute_radar_analytics`)."""

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "radarStats.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not installed or is not available on your PYTHONPATH."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()

