"""Pipeline for detecting per-band onset peaks in audio files.

Results are summarized in the returned dict; nothing is written to disk.
"""

from __future__ import annotations

from pathlib import Path

from ..flux.bands import DEFAULT_BANDS, Band
from ..global_config import (
    DEFAULT_FFT_SIZE,
    DEFAULT_THRESHOLD_MULTIPLIER,
    DEFAULT_THRESHOLD_WINDOW_SIZE,
    DEFAULT_WINDOW,
)
from ..sources.clip import load_clip
from .processor import AnalysisJob, AudioProcessor, build_band_analyzers

AUDIO_SUFFIXES = frozenset({".wav", ".flac", ".ogg", ".mp3"})


def _resolve_audio_files(files: list[Path]) -> list[Path]:
    """Expand directories to the audio files directly inside them."""
    paths: list[Path] = []
    for p in files:
        p = Path(p).resolve()
        if p.is_dir():
            paths.extend(sorted(f for f in p.iterdir() if f.suffix.lower() in AUDIO_SUFFIXES))
        else:
            paths.append(p)
    return paths


def _summarize_job(audio_path: Path, job: AnalysisJob, show_peaks: bool) -> dict:
    analyzers = job.result()
    bands = {}
    for name, analyzer in analyzers.items():
        peaks = analyzer.peaks()
        entry = {
            "state": analyzer.state,
            "bin_range": analyzer.bin_range,
            "num_peaks": len(peaks),
        }
        if show_peaks:
            entry["peak_times"] = [round(s.time, 3) for s in peaks]
        bands[name] = entry
    return {
        "file": audio_path.name,
        "status": "success",
        "duration_s": job.clip.duration,
        "num_frames": job.frames_analyzed,
        "bands": bands,
    }


def run_onsets(
    *,
    audio_files: list[Path],
    bands: tuple[Band, ...] = DEFAULT_BANDS,
    fft_size: int = DEFAULT_FFT_SIZE,
    threshold_multiplier: float = DEFAULT_THRESHOLD_MULTIPLIER,
    threshold_window_size: int = DEFAULT_THRESHOLD_WINDOW_SIZE,
    window: str = DEFAULT_WINDOW,
    show_peaks: bool = False,
    max_workers: int | None = None,
) -> dict:
    """Detect onset peaks per band for each audio file.

    Files are decoded on the calling thread and analyzed concurrently, one
    background job per file.

    Returns:
        Dict with success, total, succeeded, failed, skipped, message, items, failures.
    """
    paths = _resolve_audio_files(audio_files)
    if not paths:
        return {
            "success": True,
            "total": 0,
            "succeeded": 0,
            "failed": 0,
            "skipped": 0,
            "message": "No audio files to process.",
            "items": [],
            "failures": [],
        }

    succeeded = 0
    failed = 0
    items: list[dict] = []
    failures: list[dict] = []
    jobs: list[tuple[Path, AnalysisJob]] = []

    with AudioProcessor(fft_size=fft_size, window=window, max_workers=max_workers) as processor:
        for audio_path in paths:
            if not audio_path.exists():
                failed += 1
                failures.append({"item": str(audio_path), "reason": "File not found"})
                items.append({"file": str(audio_path), "status": "failed", "detail": "File not found"})
                continue
            try:
                clip = load_clip(audio_path)
                analyzers = build_band_analyzers(
                    bands,
                    fft_size,
                    clip.sample_rate,
                    threshold_multiplier=threshold_multiplier,
                    threshold_window_size=threshold_window_size,
                )
                jobs.append((audio_path, processor.process_clip(clip, analyzers)))
            except Exception as e:
                failed += 1
                failures.append({"item": str(audio_path), "reason": str(e)})
                items.append({"file": audio_path.name, "status": "failed", "detail": str(e)})

        for audio_path, job in jobs:
            try:
                items.append(_summarize_job(audio_path, job, show_peaks))
                succeeded += 1
            except Exception as e:
                failed += 1
                failures.append({"item": str(audio_path), "reason": str(e)})
                items.append({"file": audio_path.name, "status": "failed", "detail": str(e)})

    return {
        "success": failed == 0,
        "total": len(paths),
        "succeeded": succeeded,
        "failed": failed,
        "skipped": 0,
        "message": f"Processed {len(paths)} file(s). Succeeded: {succeeded}, failed: {failed}.",
        "items": items,
        "failures": failures,
    }
