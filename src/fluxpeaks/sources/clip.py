"""In-memory audio clips: interleaved PCM plus the metadata analysis needs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import librosa
import numpy as np

from ..errors import PreconditionError, ensure_positive
from ..spectrum.frames import combine_channels

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioClip:
    """A fully materialized clip.

    ``samples`` is interleaved: sample position 0 of every channel, then
    position 1 of every channel, and so on. ``sample_count`` counts positions
    per channel. ``duration`` defaults to ``sample_count / sample_rate``.
    """

    samples: np.ndarray
    channels: int
    sample_rate: int
    sample_count: int
    duration_s: float | None = None

    def __post_init__(self) -> None:
        ensure_positive(self.channels, "channels")
        ensure_positive(self.sample_rate, "sample_rate")
        if self.sample_count < 0:
            raise PreconditionError(f"sample_count must be >= 0, got {self.sample_count}")
        if len(self.samples) != self.channels * self.sample_count:
            raise PreconditionError(
                f"Malformed clip: {len(self.samples)} samples for {self.channels} "
                f"channel(s) x {self.sample_count} samples"
            )

    @property
    def duration(self) -> float:
        if self.duration_s is not None:
            return self.duration_s
        return self.sample_count / self.sample_rate

    def mono(self) -> np.ndarray:
        """Channel-averaged mono stream."""
        return combine_channels(self.samples, self.channels, self.sample_count)

    @classmethod
    def from_channels(cls, y, sample_rate: int) -> AudioClip:
        """Build a clip from a 1-D mono array or a (channels, samples) array."""
        y = np.asarray(y, dtype=np.float32)
        if y.ndim == 1:
            return cls(samples=y, channels=1, sample_rate=sample_rate, sample_count=len(y))
        if y.ndim != 2:
            raise PreconditionError(f"Expected a 1-D or 2-D array, got shape {y.shape}")
        channels, count = y.shape
        return cls(
            samples=np.ascontiguousarray(y.T).ravel(), # interleave
            channels=channels,
            sample_rate=sample_rate,
            sample_count=count,
        )


def load_clip(path: Path) -> AudioClip:
    """Decode an audio file at its native rate, keeping every channel."""
    y, sr = librosa.load(path, sr=None, mono=False)
    clip = AudioClip.from_channels(y, int(sr))
    logger.info(
        "Loaded %s: %d channel(s), %d Hz, %.3fs",
        Path(path).name,
        clip.channels,
        clip.sample_rate,
        clip.duration,
    )
    return clip
