from __future__ import annotations

import wave
from collections.abc import Callable
from concurrent.futures import Executor, Future
from pathlib import Path

import numpy as np
import pytest

from fluxpeaks.sources.clip import AudioClip


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Forces test mode. Application code can use this to refuse dangerous behaviors.
    Automatically applied to all tests.
    """
    monkeypatch.setenv("APP_ENV", "test")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    A dedicated temp root directory for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    root = tmp_path / "proj"
    (root / "audio").mkdir(parents=True)
    (root / "logs").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures relative-path operations go into the temp directory by default.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture(autouse=True)
def logs_dir(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect CLI log files under project_root."""
    path = project_root / "logs"
    monkeypatch.setattr("fluxpeaks.cli.base.LOGS_DIR", path)
    return path


def onset_signal(fft_size: int, silent_frames: int, loud_frames: int) -> np.ndarray:
    """Silence followed by a loud frame repeated verbatim (identical spectra)."""
    frame = np.sin(2 * np.pi * 8 * np.arange(fft_size) / fft_size)
    return np.concatenate((np.zeros(silent_frames * fft_size), np.tile(frame, loud_frames)))


def write_wav(path: Path, y: np.ndarray, sr: int) -> None:
    """Write float samples in [-1, 1] as 16-bit PCM; y is (samples,) or (channels, samples)."""
    y = np.atleast_2d(y)
    interleaved = np.clip(y.T, -1.0, 1.0).ravel()
    buf = (interleaved * 32767).astype(np.int16)
    with wave.open(str(path), "wb") as w:
        w.setnchannels(y.shape[0])
        w.setsampwidth(2)
        w.setframerate(sr)
        w.writeframes(buf.tobytes())


@pytest.fixture
def make_onset_clip() -> Callable[..., AudioClip]:
    def _make(fft_size: int = 256, sample_rate: int = 8000, silent_frames: int = 10, loud_frames: int = 6) -> AudioClip:
        return AudioClip.from_channels(onset_signal(fft_size, silent_frames, loud_frames), sample_rate)

    return _make


class DeferredExecutor(Executor):
    """Executor that holds submissions until run_all() is called."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args, **kwargs))
            except BaseException as exc:  # noqa: BLE001
                future.set_exception(exc)


@pytest.fixture
def deferred_executor() -> DeferredExecutor:
    return DeferredExecutor()
