"""Global, project-wide configuration constants.

This module intentionally contains **no business logic** – only simple,
shared filesystem anchors and analysis defaults that many modules
can import.
"""

from pathlib import Path

# Core roots
PACKAGE_ROOT: Path = Path(__file__).resolve().parent
# From src/fluxpeaks/global_config.py, go up two levels: src/fluxpeaks -> src -> repo root
PROJECT_ROOT: Path = PACKAGE_ROOT.parent.parent

# Core name
PACKAGE_NAME = "fluxpeaks"

# Logs directories
LOGS_DIR: Path = PROJECT_ROOT / "logs"

# Spectral analysis defaults
DEFAULT_FFT_SIZE = 1024
DEFAULT_WINDOW = "hamming"

# Rectified flux must exceed this multiple of the local mean to survive pruning
DEFAULT_THRESHOLD_MULTIPLIER = 1.5
# Number of flux samples averaged around the sample being thresholded
DEFAULT_THRESHOLD_WINDOW_SIZE = 50

# Band bounds in Hz; -1 means "whole spectrum"
NO_BAND_LIMIT = -1
BASS_RANGE_HZ: tuple[int, int] = (20, 250)
MID_RANGE_HZ: tuple[int, int] = (250, 4000)
HIGH_RANGE_HZ: tuple[int, int] = (4000, 20000)
