"""Spectral flux tracking and peak picking package."""

from .analyzer import SpectralFluxAnalyzer, SpectralFluxSample
from .bands import DEFAULT_BANDS, Band, band_bin_range

__all__ = [
    "DEFAULT_BANDS",
    "Band",
    "SpectralFluxAnalyzer",
    "SpectralFluxSample",
    "band_bin_range",
]
