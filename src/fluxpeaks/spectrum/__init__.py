"""Frame extraction and spectral transform package."""

from .frames import combine_channels, frame_count, iter_frames
from .transform import SpectralTransformer
from .windows import WINDOW_TYPES, signal_scale_factor, window_coefficients

__all__ = [
    "WINDOW_TYPES",
    "SpectralTransformer",
    "combine_channels",
    "frame_count",
    "iter_frames",
    "signal_scale_factor",
    "window_coefficients",
]
