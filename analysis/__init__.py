"""Pure analysis package for radar (launch-monitor) sessions.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
I/O.
"""

from .auto_config import build_auto_radar_config, select_charts
from .codec import decode_radar_columns, decode_radar_shots, encode_radar_analytics
from .config import decode_radar_config, default_radar_config, encode_radar_config
from .engine import compute_analytics

__all__ = [
    "build_auto_radar_config",
    "compute_analytics",
    "decode_radar_columns",
    "decode_radar_config",
    "decode_radar_shots",
    "default_radar_config",
    "encode_radar_analytics",
    "encode_radar_config",
    "select_charts",
]
