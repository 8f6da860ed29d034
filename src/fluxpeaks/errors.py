"""Analysis-specific exception types for the project."""

from __future__ import annotations

from typing import Any


class FluxPeaksError(Exception):
    """Base exception for analysis-related errors."""


class PreconditionError(FluxPeaksError, ValueError):
    """Raised when an input or configuration can never be analyzed."""


class SampleIndexError(FluxPeaksError, IndexError):
    """Raised when a flux sample index is outside the analyzed range."""


class AnalysisNotReadyError(FluxPeaksError):
    """Raised when results are read before the background job has finished."""


class AnalysisCancelledError(FluxPeaksError):
    """Raised from a job's result when it was cancelled between frames."""


def ensure_positive(value: Any, name: str) -> Any:
    """Raise PreconditionError unless value is strictly positive.

    Args:
        value: Number to check.
        name: Parameter name used in the error message.

    Returns:
        The value unchanged.

    Raises:
        PreconditionError: If value is not > 0.
    """
    if not value > 0:
        raise PreconditionError(f"{name} must be positive, got {value!r}")
    return value


def ensure_index(index: int, size: int) -> int:
    """Raise SampleIndexError if index does not address one of size items.

    Negative indices are rejected rather than wrapped: callers derive indices
    from playback time, where a negative value is always a bug.

    Args:
        index: Index to check.
        size: Number of addressable items.

    Returns:
        The index unchanged.

    Raises:
        SampleIndexError: If index is not in [0, size - 1].
    """
    if index < 0 or index >= size:
        raise SampleIndexError(f"Sample index {index} out of range [0, {size - 1}]")
    return index
