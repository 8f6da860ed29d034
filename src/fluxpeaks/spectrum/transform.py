"""Windowed magnitude spectra for consecutive frames of a mono stream."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

import numpy as np
from scipy.fft import rfft

from ..errors import ensure_positive
from ..global_config import DEFAULT_WINDOW
from .frames import iter_frames
from .windows import signal_scale_factor, window_coefficients

logger = logging.getLogger(__name__)


class SpectrumConsumer(Protocol):
    """Anything that accepts spectra one frame at a time, in frame order."""

    def analyze_spectrum(self, spectrum: np.ndarray, time: float) -> None: ...


class SpectralTransformer:
    """Turns fixed-size frames into window-corrected magnitude spectra.

    The window coefficients and their scale factor are computed once per
    transformer; every frame reuses them.
    """

    def __init__(self, fft_size: int, sample_rate: float, window: str = DEFAULT_WINDOW) -> None:
        self.fft_size = int(ensure_positive(fft_size, "fft_size"))
        self.sample_rate = float(ensure_positive(sample_rate, "sample_rate"))
        self.window = window
        self.coefficients = window_coefficients(window, self.fft_size)
        self.scale_factor = signal_scale_factor(self.coefficients)

    def transform(self, frame: np.ndarray) -> np.ndarray:
        """Magnitude spectrum of one frame: window, FFT, abs, correct.

        Only DC through Nyquist carry magnitudes; the mirrored upper half of
        the fft_size bins is left at zero.
        """
        windowed = np.asarray(frame, dtype=np.float64) * self.coefficients
        X = rfft(windowed, n=self.fft_size, norm="forward")  # 1/N scaled, fft_size // 2 + 1 bins
        spectrum = np.zeros(self.fft_size, dtype=np.float64)
        spectrum[: len(X)] = np.abs(X) * self.scale_factor
        return spectrum

    def frame_time(self, frame_index: int) -> float:
        """Start time in seconds of the frame at frame_index."""
        return frame_index * self.fft_size / self.sample_rate

    def spectra(
        self,
        mono: np.ndarray,
        should_stop: Callable[[], bool] | None = None,
    ) -> Iterator[tuple[np.ndarray, float]]:
        """Yield (spectrum, time) for each whole frame, in frame order.

        should_stop is consulted between frames; when it returns True the
        generator ends without transforming further frames.
        """
        for i, frame in iter_frames(mono, self.fft_size):
            if should_stop is not None and should_stop():
                logger.info("Spectral transform stopped before frame %d", i)
                return
            yield self.transform(frame), self.frame_time(i)

    def feed(
        self,
        mono: np.ndarray,
        consumers: Iterable[SpectrumConsumer],
        should_stop: Callable[[], bool] | None = None,
    ) -> int:
        """Hand every spectrum to every consumer and return the frame count fed.

        Each frame reaches all consumers before the next frame is computed,
        so a stop request always leaves them at the same frame.
        """
        consumers = list(consumers)
        fed = 0
        for spectrum, time in self.spectra(mono, should_stop=should_stop):
            for consumer in consumers:
                consumer.analyze_spectrum(spectrum, time)
            fed += 1
        logger.debug("Fed %d frame(s) to %d consumer(s)", fed, len(consumers))
        return fed
