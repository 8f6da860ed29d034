"""Tests for windows and the spectral transformer."""

from __future__ import annotations

import numpy as np
import pytest

from fluxpeaks.errors import PreconditionError
from fluxpeaks.flux.analyzer import SpectralFluxAnalyzer
from fluxpeaks.flux.bands import Band
from fluxpeaks.spectrum.transform import SpectralTransformer
from fluxpeaks.spectrum.windows import signal_scale_factor, window_coefficients


class RecordingConsumer:
    def __init__(self) -> None:
        self.calls: list[tuple[np.ndarray, float]] = []

    def analyze_spectrum(self, spectrum: np.ndarray, time: float) -> None:
        self.calls.append((spectrum, time))


class TestWindows:
    """Unit tests for window helpers."""

    def test_hamming_is_symmetric_textbook_curve(self) -> None:
        n = np.arange(16)
        expected = 0.54 - 0.46 * np.cos(2 * np.pi * n / 15)
        np.testing.assert_allclose(window_coefficients("hamming", 16), expected, atol=1e-12)

    def test_rectangular_needs_no_correction(self) -> None:
        assert signal_scale_factor(window_coefficients("rectangular", 64)) == pytest.approx(1.0)

    def test_scale_factor_is_inverse_mean(self) -> None:
        w = window_coefficients("hann", 128)
        assert signal_scale_factor(w) == pytest.approx(128 / np.sum(w))

    def test_unknown_window_rejected(self) -> None:
        with pytest.raises(PreconditionError, match="Unknown window"):
            window_coefficients("kaiser-ish", 32)


class TestSpectralTransformer:
    """Unit tests for SpectralTransformer."""

    def test_spectrum_has_fft_size_non_negative_bins(self) -> None:
        t = SpectralTransformer(64, 8000)
        spectrum = t.transform(np.random.default_rng(0).uniform(-1, 1, 64))
        assert spectrum.shape == (64,)
        assert np.all(spectrum >= 0)
        assert np.all(spectrum[:33] > 0)

    def test_mirrored_upper_half_is_zero(self) -> None:
        sr, n = 44100, 1024
        t = SpectralTransformer(n, sr)
        spectrum = t.transform(np.sin(2 * np.pi * 5000 * np.arange(n) / sr))
        assert np.all(spectrum[n // 2 + 1 :] == 0.0)
        assert np.argmax(spectrum) == round(5000 / (sr / n))

    def test_high_band_flux_comes_from_one_sided_bins(self) -> None:
        sr, n = 44100, 1024
        t = SpectralTransformer(n, sr)
        spectrum = t.transform(np.sin(2 * np.pi * 5000 * np.arange(n) / sr))
        a = SpectralFluxAnalyzer.for_band(Band("high", 4000, 20000), n, sr)
        lo, hi = a.bin_range
        a.analyze_spectrum(spectrum, 0.0)
        assert hi > n // 2
        assert a[0].spectral_flux == pytest.approx(np.sum(spectrum[lo : n // 2 + 1]))

    @pytest.mark.parametrize("window", ["hamming", "hann", "blackman", "rectangular"])
    def test_window_correction_restores_dc_amplitude(self, window: str) -> None:
        t = SpectralTransformer(256, 8000, window=window)
        spectrum = t.transform(np.full(256, 0.5))
        assert spectrum[0] == pytest.approx(0.5)

    def test_scale_factor_computed_once(self) -> None:
        t = SpectralTransformer(128, 8000)
        assert t.scale_factor == pytest.approx(signal_scale_factor(window_coefficients("hamming", 128)))

    def test_frame_time(self) -> None:
        t = SpectralTransformer(1024, 44100)
        assert t.frame_time(0) == 0.0
        assert t.frame_time(3) == pytest.approx(3 * 1024 / 44100)

    def test_invalid_configuration_rejected(self) -> None:
        with pytest.raises(PreconditionError):
            SpectralTransformer(0, 8000)
        with pytest.raises(PreconditionError):
            SpectralTransformer(64, 0)

    def test_spectra_in_frame_order(self) -> None:
        t = SpectralTransformer(32, 3200)
        times = [time for _, time in t.spectra(np.zeros(32 * 4 + 5))]
        assert times == pytest.approx([0.0, 0.01, 0.02, 0.03])

    def test_feed_reaches_every_consumer_in_order(self) -> None:
        t = SpectralTransformer(32, 3200)
        a, b = RecordingConsumer(), RecordingConsumer()
        fed = t.feed(np.random.default_rng(1).normal(size=32 * 5), [a, b])
        assert fed == 5
        assert [time for _, time in a.calls] == [time for _, time in b.calls]
        assert [time for _, time in a.calls] == sorted(time for _, time in a.calls)

    def test_should_stop_checked_between_frames(self) -> None:
        t = SpectralTransformer(32, 3200)
        a, b = RecordingConsumer(), RecordingConsumer()
        fed = t.feed(np.zeros(32 * 6), [a, b], should_stop=lambda: len(a.calls) >= 2)
        assert fed == 2
        assert len(a.calls) == len(b.calls) == 2
