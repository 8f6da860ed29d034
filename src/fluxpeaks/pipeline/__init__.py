"""Whole-clip analysis pipeline package."""

from .onsets import run_onsets
from .processor import (
    DEFAULT_BAND_NAME,
    AnalysisJob,
    AudioProcessor,
    analyze_clip,
    build_band_analyzers,
)

__all__ = [
    "DEFAULT_BAND_NAME",
    "AnalysisJob",
    "AudioProcessor",
    "analyze_clip",
    "build_band_analyzers",
    "run_onsets",
]
