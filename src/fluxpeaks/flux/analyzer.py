"""Rectified spectral flux with an adaptive, locally averaged threshold.

Each call to ``analyze_spectrum`` appends one flux sample. Once
``threshold_window_size`` samples exist, every further call finalizes the
threshold of the sample under the cursor and the peak status of the sample
just behind it, so results lag the input by one to two frames.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace

import numpy as np

from ..errors import PreconditionError, ensure_index, ensure_positive
from ..global_config import (
    DEFAULT_THRESHOLD_MULTIPLIER,
    DEFAULT_THRESHOLD_WINDOW_SIZE,
    NO_BAND_LIMIT,
)
from .bands import Band, band_bin_range

logger = logging.getLogger(__name__)

WARMING_UP = "warming_up"
STREAMING = "streaming"


@dataclass(frozen=True)
class SpectralFluxSample:
    """Flux record for one analyzed frame."""

    time: float
    spectral_flux: float
    threshold: float = 0.0
    pruned_spectral_flux: float = 0.0
    is_peak: bool = False

    def __str__(self) -> str:
        return (
            f"IsPeak {self.is_peak}\n"
            f"PrunedSpectralFlux {self.pruned_spectral_flux}\n"
            f"SpectralFlux {self.spectral_flux}\n"
            f"Threshold {self.threshold}\n"
            f"Time {self.time}"
        )


class SpectralFluxAnalyzer:
    """Streaming onset detector for one frequency band.

    Not thread-safe: a single producer feeds spectra in frame order, and
    readers wait for that producer to finish.
    """

    def __init__(
        self,
        fft_size: int,
        sample_rate: float,
        min_frequency: float = NO_BAND_LIMIT,
        max_frequency: float = NO_BAND_LIMIT,
        threshold_multiplier: float = DEFAULT_THRESHOLD_MULTIPLIER,
        threshold_window_size: int = DEFAULT_THRESHOLD_WINDOW_SIZE,
    ) -> None:
        self.fft_size = int(ensure_positive(fft_size, "fft_size"))
        self.sample_rate = float(ensure_positive(sample_rate, "sample_rate"))
        if threshold_window_size < 2:
            raise PreconditionError(
                f"threshold_window_size must be >= 2, got {threshold_window_size}"
            )
        self._min_frequency = min_frequency
        self._max_frequency = max_frequency
        self.threshold_multiplier = float(threshold_multiplier)
        self.threshold_window_size = int(threshold_window_size)
        self._half_window = self.threshold_window_size // 2
        self._lo, self._hi = band_bin_range(
            self.fft_size, self.sample_rate, min_frequency, max_frequency
        )

        # Two-slot ring buffer: _spectra[_current] is the newest spectrum,
        # the other slot the one before it. Both start silent.
        self._spectra = np.zeros((2, self.fft_size), dtype=np.float64)
        self._current = 0

        self._samples: list[SpectralFluxSample] = []
        # Start in the middle of the first full window
        self._index_to_process = self._half_window

    @classmethod
    def for_band(
        cls,
        band: Band,
        fft_size: int,
        sample_rate: float,
        **kwargs,
    ) -> SpectralFluxAnalyzer:
        """Build an analyzer restricted to band."""
        return cls(
            fft_size,
            sample_rate,
            min_frequency=band.min_frequency,
            max_frequency=band.max_frequency,
            **kwargs,
        )

    @property
    def min_frequency(self) -> float:
        return self._min_frequency

    @property
    def max_frequency(self) -> float:
        return self._max_frequency

    @property
    def bin_range(self) -> tuple[int, int]:
        """Inclusive bin indices summed into the flux."""
        return self._lo, self._hi

    @property
    def index_to_process(self) -> int:
        """Next sample index whose threshold will be computed."""
        return self._index_to_process

    @property
    def is_streaming(self) -> bool:
        return len(self._samples) >= self.threshold_window_size

    @property
    def state(self) -> str:
        return STREAMING if self.is_streaming else WARMING_UP

    @property
    def samples(self) -> tuple[SpectralFluxSample, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[SpectralFluxSample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> SpectralFluxSample:
        return self._samples[ensure_index(index, len(self._samples))]

    def peaks(self) -> list[SpectralFluxSample]:
        return [s for s in self._samples if s.is_peak]

    def analyze_spectrum(self, spectrum: np.ndarray, time: float) -> None:
        """Advance the analyzer by one frame."""
        self._set_current_spectrum(spectrum)
        self._samples.append(SpectralFluxSample(time=float(time), spectral_flux=self._rectified_flux()))

        if not self.is_streaming:
            logger.debug(
                "Not ready yet. At spectral flux sample size of %d growing to %d",
                len(self._samples),
                self.threshold_window_size,
            )
            return

        i = self._index_to_process
        threshold = self._flux_threshold(i)
        sample = self._samples[i]
        self._samples[i] = replace(
            sample,
            threshold=threshold,
            pruned_spectral_flux=max(0.0, sample.spectral_flux - threshold),
        )

        # With i finalized, i - 1 has both neighbours' pruned values
        self._detect_peak(i - 1)
        self._index_to_process += 1

    def _set_current_spectrum(self, spectrum: np.ndarray) -> None:
        spectrum = np.asarray(spectrum, dtype=np.float64)
        if spectrum.shape != (self.fft_size,):
            raise PreconditionError(
                f"Spectrum has shape {spectrum.shape}, expected ({self.fft_size},)"
            )
        self._current ^= 1
        self._spectra[self._current] = spectrum

    def _rectified_flux(self) -> float:
        """Sum of positive magnitude changes over the band's bins."""
        current = self._spectra[self._current, self._lo : self._hi + 1]
        previous = self._spectra[self._current ^ 1, self._lo : self._hi + 1]
        return float(np.sum(np.maximum(0.0, current - previous)))

    def _flux_threshold(self, index: int) -> float:
        """Scaled mean flux over [index - half, index + half), clipped to the history.

        The end bound is exclusive and clipped to the last sample, so the
        window holds at most threshold_window_size samples and is one short
        on the right whenever it reaches the newest sample.
        """
        start = max(0, index - self._half_window)
        end = min(len(self._samples) - 1, index + self._half_window)
        total = sum(s.spectral_flux for s in self._samples[start:end])
        return total / (end - start) * self.threshold_multiplier

    def _detect_peak(self, index: int) -> None:
        # Both neighbours must hold finalized pruned values
        if index - 1 < self._half_window or index + 1 >= len(self._samples):
            return
        pruned = self._samples[index].pruned_spectral_flux
        if (
            pruned > self._samples[index + 1].pruned_spectral_flux
            and pruned > self._samples[index - 1].pruned_spectral_flux
        ):
            self._samples[index] = replace(self._samples[index], is_peak=True)
