"""
fluxpeaks core package.

Onset detection over a fully materialized audio clip:
- `fluxpeaks.spectrum` turns interleaved PCM into windowed magnitude spectra
- `fluxpeaks.flux` tracks rectified spectral flux per frequency band and
  picks peaks against an adaptive threshold
- `fluxpeaks.pipeline` runs the whole thing as a background job per clip

Configuration:
- Shared, project-wide anchors and analysis defaults live in
  `fluxpeaks.global_config`.
"""
