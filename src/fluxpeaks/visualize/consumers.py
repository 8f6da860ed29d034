"""Point visualizers: strategies invoked with one flux sample at a time.

Analysis code never imports this module; host wiring looks up a sample
(e.g. via ``AnalysisJob.sample_at``) and hands it to a visualizer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ..flux.analyzer import SpectralFluxSample


@runtime_checkable
class PointVisualizer(Protocol):
    """Reacts to the flux sample at the current playback position."""

    def visualize_point(self, sample: SpectralFluxSample) -> None: ...


class PeakFlashVisualizer:
    """Fires trigger() for every peak sample it is shown."""

    def __init__(self, trigger: Callable[[], None]) -> None:
        self._trigger = trigger
        self.flash_count = 0

    def visualize_point(self, sample: SpectralFluxSample) -> None:
        if sample.is_peak:
            self.flash_count += 1
            self._trigger()


class LogVisualizer:
    """Writes every sample it is shown to a logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def visualize_point(self, sample: SpectralFluxSample) -> None:
        self.logger.log(self.level, "%s", sample)
