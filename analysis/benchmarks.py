"""Tour-average reference values per club.

Values are PGA Tour averages (imperial units) shown next to a session when the
session club can be recognized from its free-text name.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Final


@dataclass(frozen=True)
class PgaBenchmark:
    """Tour averages for one club."""

    club: str
    club_speed_mph: float
    attack_angle_deg: float
    ball_speed_mph: float
    smash_factor: float
    launch_angle_deg: float
    spin_rate_rpm: float
    max_height_yds: float
    land_angle_deg: float
    carry_yds: float

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping."""

        return asdict(self)


PGA_BENCHMARKS: Final[tuple[PgaBenchmark, ...]] = (
    PgaBenchmark("Driver", 113, -1.3, 167, 1.48, 10.9, 2686, 32, 38, 275),
    PgaBenchmark("3 Iron", 98, -3.1, 142, 1.45, 10.4, 4630, 27, 46, 212),
    PgaBenchmark("4 Iron", 96, -3.4, 137, 1.43, 11.0, 4836, 28, 48, 203),
    PgaBenchmark("5 Iron", 94, -3.7, 132, 1.41, 12.1, 5361, 31, 49, 194),
    PgaBenchmark("6 Iron", 92, -4.1, 127, 1.38, 14.1, 6231, 30, 50, 183),
    PgaBenchmark("7 Iron", 90, -4.3, 120, 1.33, 16.3, 7097, 32, 50, 172),
    PgaBenchmark("8 Iron", 87, -4.5, 115, 1.32, 18.1, 7998, 31, 50, 160),
    PgaBenchmark("9 Iron", 85, -4.7, 109, 1.28, 20.4, 8647, 30, 51, 148),
    PgaBenchmark("PW", 83, -5.0, 102, 1.23, 24.2, 9304, 29, 52, 136),
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+", re.IGNORECASE)
_WOOD_ONE_RE = re.compile(r"(bois|wood)\s*1|1\s*(bois|wood)")
_IRON_RE = re.compile(r"([3-9])\s?iron")


def normalize_club_name(value: str | None) -> str:
    """Lowercase a club name and collapse non-alphanumerics to spaces."""

    return _NON_ALNUM_RE.sub(" ", value or "").strip().lower()


def _by_club(club: str) -> PgaBenchmark | None:
    return next((entry for entry in PGA_BENCHMARKS if entry.club == club), None)


def find_pga_benchmark(club_name: str | None) -> PgaBenchmark | None:
    """Find the tour benchmark for a free-text club name.

    Args:
        club_name: Session club label (e.g. "Fer 7 / 7 Iron", "Driver 10.5").

    Returns:
        Matching PgaBenchmark, or None when the club is not recognized.
    """

    normalized = normalize_club_name(club_name)
    if not normalized:
        return None
    for entry in PGA_BENCHMARKS:
        if normalize_club_name(entry.club) in normalized:
            return entry
    if "driver" in normalized or _WOOD_ONE_RE.search(normalized):
        return _by_club("Driver")
    if "pw" in normalized or "pitch" in normalized:
        return _by_club("PW")
    match = _IRON_RE.search(normalized)
    if match:
        return _by_club(f"{match.group(1)} Iron")
    return None
