"""Canonical playback-time and sample-index conversions.

External consumers index flux samples with ``map_time_to_index``; keep its
arithmetic exactly as written so indices match across implementations.
"""

from __future__ import annotations

import math

from ..errors import ensure_positive


def map_time_to_index(time: float, duration: float, sample_count: int) -> int:
    """Map a playback time to the index of the analyzed sample covering it.

    Args:
        time: Playback position in seconds.
        duration: Clip duration in seconds.
        sample_count: Number of analyzed samples spanning the clip.

    Returns:
        ``floor(time / (duration / sample_count))``. For time in
        ``[0, duration)`` this lies in ``[0, sample_count - 1]``.

    Raises:
        PreconditionError: If duration or sample_count is not positive.
    """
    ensure_positive(duration, "duration")
    ensure_positive(sample_count, "sample_count")
    length_per_sample = duration / sample_count
    return math.floor(time / length_per_sample)


def time_from_index(index: int, sample_rate: float) -> float:
    """Time in seconds of sample index at sample_rate."""
    ensure_positive(sample_rate, "sample_rate")
    return (1.0 / sample_rate) * index


def clamp_index(index: int, sample_count: int) -> int:
    """Clamp index into [0, sample_count - 1]."""
    ensure_positive(sample_count, "sample_count")
    return min(max(index, 0), sample_count - 1)
