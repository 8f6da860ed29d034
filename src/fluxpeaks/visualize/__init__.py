"""Consumers that react to individual flux samples."""

from .consumers import LogVisualizer, PeakFlashVisualizer, PointVisualizer

__all__ = [
    "LogVisualizer",
    "PeakFlashVisualizer",
    "PointVisualizer",
]
