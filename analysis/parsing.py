"""Raw cell parsing and shot normalization.

Launch-monitor exports mix plain numbers, localized decimals ("5,5") and
directional notation ("5L", "3.5R"). This module turns raw rows into
`NormalizedShot` DTOs. It is defensive: malformed cells are dropped from the
shot, and only rows without a usable shot number are skipped.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from typing import Final

from .columns import ColumnMap
from .dto import NormalizedShot
from .fields import NUMERIC_FIELDS, CanonicalField

logger = logging.getLogger(__name__)

RawShot = Mapping[str, object]

_DIRECTIONAL_RE = re.compile(r"^(-?\d+(?:[.,]\d+)?)([LR])$", re.IGNORECASE)
_NON_NUMERIC_RE = re.compile(r"[^\d.-]")

_EMPTY_MARKERS: Final[frozenset[str]] = frozenset({"", "-", "—"})
_SUMMARY_ROW_MARKERS: Final[tuple[str, ...]] = ("avg", "dev")


def parse_directional_number(raw: str) -> float | None:
    """Parse a directional value such as `5L`, `3.5R` or `5,5L`.

    Args:
        raw: Raw cell text.

    Returns:
        A negative float for "L", a positive float for "R", or None when the
        text is not in directional notation.
    """

    match = _DIRECTIONAL_RE.match(raw.strip())
    if match is None:
        return None
    numeric = float(match.group(1).replace(",", ".", 1))
    if not math.isfinite(numeric):
        return None
    return -numeric if match.group(2).upper() == "L" else numeric


def parse_value(value: object) -> float | str | object | None:
    """Parse one raw cell into a number when possible.

    Args:
        value: Raw cell value (number, string, None, or anything else).

    Returns:
        - None for missing markers (None, blank, "-", em dash) and non-finite numbers.
        - A float for numeric or parseable strings.
        - The trimmed string when the text is not numeric.
        - Any other object unchanged.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            as_float = float(value)
        except OverflowError:
            return None
        return as_float if math.isfinite(as_float) else None
    if not isinstance(value, str):
        return value

    trimmed = value.strip()
    if trimmed in _EMPTY_MARKERS:
        return None
    directional = parse_directional_number(trimmed)
    if directional is not None:
        return directional
    cleaned = _NON_NUMERIC_RE.sub("", trimmed.replace(",", ".", 1))
    try:
        numeric = float(cleaned)
    except ValueError:
        return trimmed
    if math.isfinite(numeric):
        return numeric
    return trimmed


def coerce_shot_index(raw: object) -> int | None:
    """Coerce a raw shot-number cell into a positive integer.

    Args:
        raw: Raw `shot_index` cell.

    Returns:
        A positive int, or None when missing, unparseable, fractional,
        non-positive or too large for a float.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            numeric = float(raw)
        except OverflowError:
            return None
    else:
        try:
            numeric = float(_NON_NUMERIC_RE.sub("", str(raw)))
        except ValueError:
            return None
    if not math.isfinite(numeric) or not numeric.is_integer() or numeric <= 0:
        return None
    return int(numeric)


def is_summary_row(raw_index: object) -> bool:
    """Return True for vendor-injected average/deviation rows."""

    if not isinstance(raw_index, str):
        return False
    lowered = raw_index.strip().lower()
    return any(marker in lowered for marker in _SUMMARY_ROW_MARKERS)


def normalize_shot(shot: RawShot, *, column_map: ColumnMap) -> NormalizedShot | None:
    """Normalize a single raw row.

    Args:
        shot: Raw cells keyed by column key. `shot_index` (and optionally
            `shot_type`) are read from literal keys.
        column_map: Canonical field -> bound column.

    Returns:
        NormalizedShot, or None when the row is a summary row or has no
        positive shot number.
    """

    raw_index = shot.get("shot_index")
    if is_summary_row(raw_index):
        return None
    shot_index = coerce_shot_index(raw_index)
    if shot_index is None:
        return None

    shot_type: str | None = None
    literal_type = shot.get("shot_type")
    if isinstance(literal_type, str):
        shot_type = literal_type
    else:
        type_column = column_map.get(CanonicalField.shot_type)
        if type_column is not None:
            raw_type = shot.get(type_column.key)
            if isinstance(raw_type, str) and raw_type.strip():
                shot_type = raw_type.strip()

    values: dict[str, float] = {}
    for canonical in NUMERIC_FIELDS:
        column = column_map.get(canonical)
        if column is None:
            continue
        parsed = parse_value(shot.get(column.key))
        if isinstance(parsed, float):
            values[str(canonical)] = parsed

    return NormalizedShot(shot_index=shot_index, shot_type=shot_type, values=values)


def normalize_shots(shots: Iterable[RawShot], *, column_map: ColumnMap) -> tuple[NormalizedShot, ...]:
    """Normalize raw rows, dropping summary rows and rows without a shot number.

    Args:
        shots: Raw rows in source order.
        column_map: Canonical field -> bound column.

    Returns:
        Normalized shots in source order.
    """

    normalized: list[NormalizedShot] = []
    dropped = 0
    for shot in shots:
        result = normalize_shot(shot, column_map=column_map)
        if result is None:
            dropped += 1
            continue
        normalized.append(result)
    if dropped:
        logger.debug("Dropped %d raw rows without a usable shot number.", dropped)
    return tuple(normalized)
