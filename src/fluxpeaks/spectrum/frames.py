"""Mono mixdown and fixed-size framing of PCM sample buffers."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from ..errors import PreconditionError, ensure_positive


def combine_channels(samples, num_channels, num_samples):
    """Average interleaved channels into a single mono stream.

    Parameters
    ----------
    samples : array-like
        Interleaved samples, ``num_channels * num_samples`` long.
    num_channels : int
        Number of interleaved channels.
    num_samples : int
        Samples per channel.

    Returns
    -------
    np.ndarray
        ``num_samples`` float64 values, each the mean of its channel values.
    """
    ensure_positive(num_channels, "num_channels")
    if num_samples < 0:
        raise PreconditionError(f"num_samples must be >= 0, got {num_samples}")
    x = np.asarray(samples, dtype=np.float64).ravel()
    if x.size != num_channels * num_samples:
        raise PreconditionError(
            f"Malformed clip: {x.size} samples for {num_channels} channel(s) "
            f"x {num_samples} samples"
        )
    if num_channels == 1:
        return x.copy()
    return x.reshape(num_samples, num_channels).mean(axis=1) # one row per sample position


def frame_count(length, fft_size):
    """Number of whole frames of fft_size in a stream of length samples."""
    ensure_positive(fft_size, "fft_size")
    return length // fft_size


def iter_frames(mono, fft_size) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (frame_index, frame) for consecutive non-overlapping frames.

    Trailing samples that do not fill a whole frame are discarded.
    """
    mono = np.asarray(mono, dtype=np.float64)
    n_frames = frame_count(len(mono), fft_size)
    frames = mono[: n_frames * fft_size].reshape(n_frames, fft_size)
    for i in range(n_frames):
        yield i, frames[i]
