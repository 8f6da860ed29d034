"""Tests for point visualizers."""

from __future__ import annotations

import logging

from fluxpeaks.flux.analyzer import SpectralFluxSample
from fluxpeaks.visualize.consumers import LogVisualizer, PeakFlashVisualizer, PointVisualizer

PEAK = SpectralFluxSample(time=0.5, spectral_flux=3.0, threshold=1.0, pruned_spectral_flux=2.0, is_peak=True)
QUIET = SpectralFluxSample(time=0.6, spectral_flux=0.1)


def test_flash_only_on_peaks() -> None:
    fired: list[int] = []
    v = PeakFlashVisualizer(lambda: fired.append(1))
    for sample in (QUIET, PEAK, QUIET, PEAK):
        v.visualize_point(sample)
    assert len(fired) == 2
    assert v.flash_count == 2


def test_log_visualizer_writes_sample(caplog) -> None:
    v = LogVisualizer(logging.getLogger("test.points"), level=logging.INFO)
    with caplog.at_level(logging.INFO, logger="test.points"):
        v.visualize_point(PEAK)
    assert "IsPeak True" in caplog.text
    assert "Time 0.5" in caplog.text


def test_strategies_satisfy_protocol() -> None:
    assert isinstance(PeakFlashVisualizer(lambda: None), PointVisualizer)
    assert isinstance(LogVisualizer(), PointVisualizer)
