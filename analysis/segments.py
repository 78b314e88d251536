"""Per-dimension segmentation of enriched shots.

Each dimension groups shots by a selector returning a bucket label or None.
Shots with a None label are left out of that dimension entirely; buckets keep
first-seen order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Final

from .dto import EnrichedShot, Segment, SegmentSummary
from .stats import corridor_percent, mean, population_std

Selector = Callable[[EnrichedShot], str | None]


def _shot_type(shot: EnrichedShot) -> str | None:
    """Return a non-blank shot type, else None."""

    value = shot.shot_type
    if isinstance(value, str) and value.strip():
        return value
    return None


def _label(key: str) -> Selector:
    """Build a selector reading a derived bucket label."""

    return lambda shot: shot.label(key)


SEGMENT_DIMENSIONS: Final[tuple[tuple[str, Selector], ...]] = (
    ("byShotType", _shot_type),
    ("byLeftRight", _label("left_right")),
    ("bySmashBin", _label("smash_bin")),
    ("byImpactZone", _label("impact_zone")),
    ("byAbsFtpQuantile", _label("abs_ftp_bin")),
    ("byLaunchVBin", _label("launch_v_bin")),
    ("byPeriodTertile", _label("period_tertile")),
)


def _values(shots: Sequence[EnrichedShot], key: str) -> list[float]:
    """Collect present values for a key."""

    return [value for shot in shots if (value := shot.number(key)) is not None]


def summarize_bucket(
    key: str,
    shots: Sequence[EnrichedShot],
    *,
    lat_threshold: float,
    dist_threshold: float,
) -> SegmentSummary:
    """Aggregate one bucket.

    Args:
        key: Bucket label.
        shots: Shots in the bucket.
        lat_threshold: Lateral corridor half-width.
        dist_threshold: Distance-from-target corridor half-width.

    Returns:
        SegmentSummary with means/stds and corridor percentages.
    """

    carry = _values(shots, "carry")
    total = _values(shots, "total")
    lateral = _values(shots, "lateral")
    return SegmentSummary(
        key=key,
        count=len(shots),
        carry_mean=mean(carry),
        carry_std=population_std(carry),
        total_mean=mean(total),
        total_std=population_std(total),
        lateral_mean=mean(lateral),
        lateral_std=population_std(lateral),
        smash_mean=mean(_values(shots, "smash")),
        rpm_mean=mean(_values(shots, "spin_rpm")),
        launch_v_mean=mean(_values(shots, "launch_v")),
        ftp_mean=mean(_values(shots, "ftp")),
        path_mean=mean(_values(shots, "path")),
        within_lat10=corridor_percent(lateral, lat_threshold),
        within_dist10=corridor_percent(_values(shots, "distance_from_target"), dist_threshold),
    )


def build_segment(
    key: str,
    shots: Sequence[EnrichedShot],
    selector: Selector,
    *,
    lat_threshold: float,
    dist_threshold: float,
) -> Segment:
    """Bucket shots with `selector` and summarize every bucket."""

    buckets: dict[str, list[EnrichedShot]] = {}
    for shot in shots:
        bucket = selector(shot)
        if not bucket:
            continue
        buckets.setdefault(bucket, []).append(shot)

    summaries = tuple(
        summarize_bucket(
            bucket_key,
            bucket_shots,
            lat_threshold=lat_threshold,
            dist_threshold=dist_threshold,
        )
        for bucket_key, bucket_shots in buckets.items()
    )
    return Segment(key=key, summaries=summaries)


def build_segments(
    shots: Sequence[EnrichedShot],
    *,
    lat_threshold: float = 10.0,
    dist_threshold: float = 10.0,
) -> dict[str, Segment]:
    """Build all seven segmentation dimensions.

    Args:
        shots: Enriched shots in source order.
        lat_threshold: Lateral corridor half-width for `within_lat10`.
        dist_threshold: Distance corridor half-width for `within_dist10`.

    Returns:
        Dimension key -> Segment, in fixed dimension order.
    """

    return {
        key: build_segment(
            key,
            shots,
            selector,
            lat_threshold=lat_threshold,
            dist_threshold=dist_threshold,
        )
        for key, selector in SEGMENT_DIMENSIONS
    }
