"""Frequency bands and their FFT bin ranges."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import PreconditionError, ensure_positive
from ..global_config import BASS_RANGE_HZ, HIGH_RANGE_HZ, MID_RANGE_HZ, NO_BAND_LIMIT

# Extra bins included on each side of a band
BAND_GUARD_BINS = 2


@dataclass(frozen=True)
class Band:
    """A named frequency range; either bound at -1 means the whole spectrum."""

    name: str
    min_frequency: float = NO_BAND_LIMIT
    max_frequency: float = NO_BAND_LIMIT

    @property
    def is_full_spectrum(self) -> bool:
        return self.min_frequency == NO_BAND_LIMIT or self.max_frequency == NO_BAND_LIMIT


DEFAULT_BANDS: tuple[Band, ...] = (
    Band("bass", *BASS_RANGE_HZ),
    Band("mid", *MID_RANGE_HZ),
    Band("high", *HIGH_RANGE_HZ),
)


def band_bin_range(num_bins, sample_rate, min_frequency=NO_BAND_LIMIT, max_frequency=NO_BAND_LIMIT):
    """Inclusive (lo, hi) bin indices covering a band plus its guard bins.

    Bin width is ``sample_rate / 2 / num_bins`` Hz. Without a band limit the
    range covers every bin. Bounds are truncated toward zero, then clamped to
    ``[0, num_bins - 1]``.
    """
    ensure_positive(num_bins, "num_bins")
    ensure_positive(sample_rate, "sample_rate")
    if min_frequency == NO_BAND_LIMIT or max_frequency == NO_BAND_LIMIT:
        return 0, num_bins - 1
    if min_frequency < 0 or max_frequency < min_frequency:
        raise PreconditionError(
            f"Invalid band: min_frequency={min_frequency}, max_frequency={max_frequency}"
        )
    hertz_per_bin = sample_rate / 2 / num_bins
    lo = int(max(0.0, min_frequency / hertz_per_bin - BAND_GUARD_BINS))
    hi = int(min(num_bins - 1, max_frequency / hertz_per_bin + BAND_GUARD_BINS))
    return lo, hi
