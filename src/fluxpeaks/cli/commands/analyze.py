"""CLI command for per-band onset peak detection."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...flux.bands import DEFAULT_BANDS, Band
from ...global_config import (
    DEFAULT_FFT_SIZE,
    DEFAULT_THRESHOLD_MULTIPLIER,
    DEFAULT_THRESHOLD_WINDOW_SIZE,
    DEFAULT_WINDOW,
)
from ...pipeline.onsets import run_onsets
from ..base import BaseCLI

def _parse_band(text: str) -> Band:
    """Parse NAME:MIN_HZ:MAX_HZ into a Band."""
    parts = text.split(":")
    if len(parts) != 3:
        raise typer.BadParameter(f"Band must look like NAME:MIN_HZ:MAX_HZ, got {text!r}")
    name, lo, hi = parts
    try:
        return Band(name, float(lo), float(hi))
    except ValueError:
        raise typer.BadParameter(f"Band bounds must be numbers, got {text!r}") from None


def analyze_command(
    files: Annotated[
        list[Path],
        typer.Argument(help="Audio file(s) or folder(s) to analyze."),
    ],
    band: Annotated[
        list[str] | None,
        typer.Option(
            "--band",
            "-b",
            help="Band as NAME:MIN_HZ:MAX_HZ (repeatable). Default: bass, mid, high.",
        ),
    ] = None,
    fft_size: Annotated[
        int,
        typer.Option("--fft-size", "-N", help="FFT size and frame length in samples."),
    ] = DEFAULT_FFT_SIZE,
    threshold_multiplier: Annotated[
        float,
        typer.Option("--threshold-multiplier", "-m", help="Sensitivity multiplier on the local mean flux."),
    ] = DEFAULT_THRESHOLD_MULTIPLIER,
    threshold_window_size: Annotated[
        int,
        typer.Option("--threshold-window-size", "-w", help="Flux samples averaged per threshold."),
    ] = DEFAULT_THRESHOLD_WINDOW_SIZE,
    window: Annotated[
        str,
        typer.Option("--window", help="Window function: hamming, hann, blackman, rectangular."),
    ] = DEFAULT_WINDOW,
    show_peaks: Annotated[
        bool,
        typer.Option("--show-peaks", help="List peak times for every band."),
    ] = False,
    no_log: Annotated[
        bool,
        typer.Option("--no-log", help="Do not write a log file to logs/."),
    ] = False,
) -> None:
    """Detect onset peaks in each file, separately per frequency band.

    Every file is split into non-overlapping frames of --fft-size samples.
    A frame is a peak when its rectified spectral flux, after subtracting the
    local threshold, is higher than both neighbouring frames.
    """
    cli = BaseCLI()
    bands = tuple(_parse_band(b) for b in band) if band else DEFAULT_BANDS

    def _run() -> dict:
        return run_onsets(
            audio_files=list(files),
            bands=bands,
            fft_size=fft_size,
            threshold_multiplier=threshold_multiplier,
            threshold_window_size=threshold_window_size,
            window=window.lower(),
            show_peaks=show_peaks,
        )

    cli.handle_cli_operation(
        operation="analyze",
        op_callable=_run,
        pre_message=f"Analyzing {len(files)} input(s) over {len(bands)} band(s)...",
        log_module="analyze",
        log_method=window.lower(),
        enable_log=not no_log,
        log_context={
            "inputs": str([str(p) for p in files]),
            "bands": ", ".join(f"{b.name}={b.min_frequency}-{b.max_frequency}" for b in bands),
            "fft_size": fft_size,
        },
    )
