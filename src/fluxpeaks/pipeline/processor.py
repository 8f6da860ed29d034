"""Whole-clip onset analysis, synchronously or as a background job.

One job runs the full pipeline for one clip: mono mixdown, framing, spectral
transform, and flux analysis for every band. Each frame reaches every band's
analyzer before the next frame is computed. Separate jobs share no mutable
state and may run concurrently on the same processor.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent import futures
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor

from ..errors import (
    AnalysisCancelledError,
    AnalysisNotReadyError,
    PreconditionError,
    ensure_positive,
)
from ..flux.analyzer import SpectralFluxAnalyzer, SpectralFluxSample
from ..flux.bands import DEFAULT_BANDS, Band
from ..global_config import (
    DEFAULT_FFT_SIZE,
    DEFAULT_THRESHOLD_MULTIPLIER,
    DEFAULT_THRESHOLD_WINDOW_SIZE,
    DEFAULT_WINDOW,
)
from ..sources.clip import AudioClip
from ..spectrum.frames import frame_count
from ..spectrum.transform import SpectralTransformer
from ..utils.time import map_time_to_index

logger = logging.getLogger(__name__)

DEFAULT_BAND_NAME = "default"

BandCallback = Callable[[str, SpectralFluxAnalyzer], None]


def build_band_analyzers(
    bands: Iterable[Band],
    fft_size: int,
    sample_rate: float,
    threshold_multiplier: float = DEFAULT_THRESHOLD_MULTIPLIER,
    threshold_window_size: int = DEFAULT_THRESHOLD_WINDOW_SIZE,
) -> dict[str, SpectralFluxAnalyzer]:
    """One fresh analyzer per band, keyed by band name."""
    analyzers: dict[str, SpectralFluxAnalyzer] = {}
    for band in bands:
        if band.name in analyzers:
            raise PreconditionError(f"Duplicate band name: {band.name}")
        analyzers[band.name] = SpectralFluxAnalyzer.for_band(
            band,
            fft_size,
            sample_rate,
            threshold_multiplier=threshold_multiplier,
            threshold_window_size=threshold_window_size,
        )
    return analyzers


def _run_pipeline(
    clip: AudioClip,
    transformer: SpectralTransformer,
    analyzers: Mapping[str, SpectralFluxAnalyzer],
    should_stop: Callable[[], bool] | None = None,
) -> int:
    """Feed every whole frame of clip to every analyzer; return frames fed."""
    t0 = time.perf_counter()
    mono = clip.mono()
    logger.debug("Channels have been combined (%d channel(s))", clip.channels)

    expected = frame_count(len(mono), transformer.fft_size)
    fed = transformer.feed(mono, analyzers.values(), should_stop=should_stop)
    if fed < expected:
        raise AnalysisCancelledError(f"Analysis cancelled after {fed} of {expected} frame(s)")

    for name, analyzer in analyzers.items():
        if not analyzer.is_streaming:
            logger.warning(
                "Band %s never warmed up: %d frame(s) < threshold window of %d",
                name,
                fed,
                analyzer.threshold_window_size,
            )
    logger.info(
        "Analyzed %d frame(s) for %d band(s) in %.2fs",
        fed,
        len(analyzers),
        time.perf_counter() - t0,
    )
    return fed


def analyze_clip(
    clip: AudioClip,
    bands: Iterable[Band] = DEFAULT_BANDS,
    fft_size: int = DEFAULT_FFT_SIZE,
    threshold_multiplier: float = DEFAULT_THRESHOLD_MULTIPLIER,
    threshold_window_size: int = DEFAULT_THRESHOLD_WINDOW_SIZE,
    window: str = DEFAULT_WINDOW,
) -> dict[str, SpectralFluxAnalyzer]:
    """Run the whole pipeline on the calling thread.

    Returns:
        Band name -> analyzer holding that band's flux samples.
    """
    transformer = SpectralTransformer(fft_size, clip.sample_rate, window=window)
    analyzers = build_band_analyzers(
        bands,
        fft_size,
        clip.sample_rate,
        threshold_multiplier=threshold_multiplier,
        threshold_window_size=threshold_window_size,
    )
    _run_pipeline(clip, transformer, analyzers)
    return analyzers


class AnalysisJob:
    """Handle on one clip's background analysis.

    ``ready`` flips to True exactly once, after the job has finished
    (successfully, with an error, or cancelled). Results must not be read
    before then; accessors raise AnalysisNotReadyError instead of blocking.
    """

    def __init__(self, clip: AudioClip, band_names: Iterable[str]) -> None:
        self.clip = clip
        self.band_names = tuple(band_names)
        self.frames_analyzed = 0
        self._stop = threading.Event()
        self._future: Future | None = None

    def _attach(self, future: Future) -> None:
        self._future = future

    @property
    def ready(self) -> bool:
        # Same state result() reads, so the two never disagree.
        return self._future is not None and self._future.done()

    @property
    def cancel_requested(self) -> bool:
        return self._stop.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until ready or timeout; return the ready flag."""
        if self._future is None:
            return False
        futures.wait([self._future], timeout=timeout)
        return self.ready

    def cancel(self) -> None:
        """Ask the job to stop at the next frame boundary."""
        self._stop.set()
        if self._future is not None:
            self._future.cancel()

    def result(self, timeout: float | None = None) -> dict[str, SpectralFluxAnalyzer]:
        """Wait for the job and return its analyzers; re-raise its failure."""
        if self._future is None:
            raise AnalysisNotReadyError("Job was never submitted")
        try:
            return self._future.result(timeout)
        except CancelledError:
            raise AnalysisCancelledError("Analysis cancelled before it started") from None

    def analyzer(self, name: str = DEFAULT_BAND_NAME) -> SpectralFluxAnalyzer:
        if not self.ready:
            raise AnalysisNotReadyError(f"Analysis of band {name} has not finished")
        analyzers = self.result()
        if name not in analyzers:
            raise KeyError(f"Unknown band: {name}. Use one of: {list(analyzers)}")
        return analyzers[name]

    def current_index(self, playback_time: float) -> int:
        """Flux sample index at playback_time seconds into the clip."""
        if not self.ready:
            raise AnalysisNotReadyError("Analysis has not finished")
        return map_time_to_index(playback_time, self.clip.duration, self.frames_analyzed)

    def sample_at(self, name: str, playback_time: float) -> SpectralFluxSample:
        analyzer = self.analyzer(name)
        return analyzer[self.current_index(playback_time)]


class AudioProcessor:
    """Runs clip analyses on a worker pool.

    Owns a ThreadPoolExecutor unless one is passed in; use as a context
    manager, or call shutdown(), to release an owned pool.
    """

    def __init__(
        self,
        fft_size: int = DEFAULT_FFT_SIZE,
        window: str = DEFAULT_WINDOW,
        executor: Executor | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.fft_size = int(ensure_positive(fft_size, "fft_size"))
        self.window = window
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fluxpeaks"
        )

    def __enter__(self) -> AudioProcessor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def process_clip(
        self,
        clip: AudioClip,
        analyzers: Mapping[str, SpectralFluxAnalyzer] | SpectralFluxAnalyzer,
        on_band_complete: BandCallback | None = None,
    ) -> AnalysisJob:
        """Validate inputs now, then analyze clip in the background.

        Args:
            clip: Clip to analyze.
            analyzers: Fresh analyzers keyed by band name, or a single
                analyzer (registered as "default").
            on_band_complete: Called once per band, in band order, with
                (name, analyzer) after the last frame has been fed. Not
                called when the job fails or is cancelled.

        Returns:
            AnalysisJob whose result is the analyzers mapping.

        Raises:
            PreconditionError: If an analyzer does not match the processor's
                FFT size or the clip's sample rate, or was already fed.
        """
        if isinstance(analyzers, SpectralFluxAnalyzer):
            analyzers = {DEFAULT_BAND_NAME: analyzers}
        analyzers = dict(analyzers)
        if not analyzers:
            raise PreconditionError("At least one analyzer is required")
        for name, analyzer in analyzers.items():
            if analyzer.fft_size != self.fft_size:
                raise PreconditionError(
                    f"Analyzer {name} expects fft_size={analyzer.fft_size}, "
                    f"processor uses {self.fft_size}"
                )
            if analyzer.sample_rate != clip.sample_rate:
                raise PreconditionError(
                    f"Analyzer {name} expects sample_rate={analyzer.sample_rate}, "
                    f"clip has {clip.sample_rate}"
                )
            if len(analyzer):
                raise PreconditionError(f"Analyzer {name} has already been fed")
        transformer = SpectralTransformer(self.fft_size, clip.sample_rate, window=self.window)

        job = AnalysisJob(clip, analyzers)

        def _unit() -> dict[str, SpectralFluxAnalyzer]:
            try:
                job.frames_analyzed = _run_pipeline(
                    clip, transformer, analyzers, should_stop=job._stop.is_set
                )
                if on_band_complete is not None:
                    for name, analyzer in analyzers.items():
                        on_band_complete(name, analyzer)
            except AnalysisCancelledError:
                logger.info("Clip analysis cancelled")
                raise
            except Exception:
                logger.exception("Clip analysis failed")
                raise
            return analyzers

        job._attach(self._executor.submit(_unit))
        return job
