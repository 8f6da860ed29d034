"""Utility modules.

This package provides shared utilities used across the codebase.
"""

from .time import clamp_index, map_time_to_index, time_from_index

__all__ = [
    "clamp_index",
    "map_time_to_index",
    "time_from_index",
]
