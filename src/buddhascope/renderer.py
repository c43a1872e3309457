"""
Render session.

Owns the accumulation canvas for one render: fits the viewport, runs the
Julia walk (optionally split over several workers), draws the guide circles,
tone-maps, and hands back the finished RGB image.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from buddhascope.core.canvas import Canvas
from buddhascope.core.density import log_density_normalize
from buddhascope.core.orbit import (
    DEFAULT_JULIA_POINTS,
    DEFAULT_SUB_ORBIT_STEPS,
    DEFAULT_WARMUP,
    JuliaWalk,
    RenderCancelled,
)
from buddhascope.core.plane import Axes
from buddhascope.core.plot import Plot
from buddhascope.decorations import DEFAULT_CIRCLES, draw_circles

ProgressCallback = Callable[[int, int], None]

__all__ = ["BuddhaRenderer", "RenderCancelled", "RenderConfig", "RenderResult"]


@dataclass
class RenderConfig:
    """Everything that shapes one render."""

    width: int = 1920
    height: int = 1080
    samples: int = 10_000_000

    # Viewport
    center: complex = 0j
    radius: float = 2.0

    # Walk
    julia_points: Tuple[complex, ...] = DEFAULT_JULIA_POINTS
    warmup: int = DEFAULT_WARMUP
    sub_orbit_steps: int = DEFAULT_SUB_ORBIT_STEPS
    seed: Optional[int] = None

    # Performance
    chunk_size: int = 65536
    workers: int = 1  # >1 splits the samples over independent walks

    # Overlays
    circles_enabled: bool = True
    circles: Tuple[Tuple[complex, float], ...] = DEFAULT_CIRCLES
    circle_points: int = 2048


@dataclass
class RenderResult:
    """Output of a finished render."""

    image: np.ndarray              # (H, W, 3) uint8
    largest_hit_count: float       # informational, not part of the tone curve
    hit_total: float
    samples: int
    accum: Optional[np.ndarray] = field(default=None, repr=False)


class _ProgressTracker:
    """Sums per-worker progress into one callback."""

    def __init__(self, callback: Optional[ProgressCallback], total: int, n_workers: int):
        self._callback = callback
        self._total = total
        self._current = [0] * n_workers
        self._lock = threading.Lock()

    def for_worker(self, index: int) -> Optional[ProgressCallback]:
        if self._callback is None:
            return None

        def report(current: int, _total: int) -> None:
            with self._lock:
                self._current[index] = current
                self._callback(min(sum(self._current), self._total), self._total)

        return report


def split_samples(samples: int, workers: int) -> List[int]:
    """Divide ``samples`` as evenly as possible; earlier workers get the remainder."""
    base, extra = divmod(samples, workers)
    return [base + (1 if i < extra else 0) for i in range(workers)]


class BuddhaRenderer:
    """
    Multi-Julia inverse-iteration density renderer.

    Usage:
        renderer = BuddhaRenderer(RenderConfig(width=640, height=360, samples=10**6, seed=1))
        result = renderer.render()
        save_image("out.ppm", result.image)
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.cfg = config or RenderConfig()

        if self.cfg.samples <= 0:
            raise ValueError(f"samples must be positive, got {self.cfg.samples}")
        if self.cfg.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.cfg.workers}")
        if self.cfg.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.cfg.radius}")

    @property
    def axes(self) -> Axes:
        return Axes.from_point(self.cfg.center, self.cfg.radius)

    def _make_walk(self, rng: np.random.Generator) -> JuliaWalk:
        return JuliaWalk(
            self.cfg.julia_points,
            rng=rng,
            warmup=self.cfg.warmup,
            sub_orbit_steps=self.cfg.sub_orbit_steps,
        )

    def accumulate(
        self,
        canvas: Canvas,
        progress_callback: Optional[ProgressCallback] = None,
        cancel=None,
    ) -> Plot:
        """Run the configured walk(s) into ``canvas`` and return its plot."""
        plot = Plot(self.axes, canvas)

        if self.cfg.workers == 1:
            walk = self._make_walk(np.random.default_rng(self.cfg.seed))
            walk.run(
                plot,
                self.cfg.samples,
                chunk_size=self.cfg.chunk_size,
                progress_callback=progress_callback,
                cancel=cancel,
            )
            return plot

        self._accumulate_partitioned(plot, progress_callback, cancel)
        return plot

    def _accumulate_partitioned(
        self,
        plot: Plot,
        progress_callback: Optional[ProgressCallback],
        cancel,
    ) -> None:
        # Each worker gets a private canvas and generator; the partial sums
        # are merged in worker order once every walk has finished.
        cfg = self.cfg
        seeds = np.random.SeedSequence(cfg.seed).spawn(cfg.workers)
        counts = split_samples(cfg.samples, cfg.workers)
        tracker = _ProgressTracker(progress_callback, cfg.samples, cfg.workers)

        partials: List[Canvas] = []
        try:
            for _ in range(cfg.workers):
                partials.append(Canvas(plot.canvas.width, plot.canvas.height))

            with ThreadPoolExecutor(max_workers=cfg.workers) as pool:
                futures = []
                for i, (seed, count, partial) in enumerate(zip(seeds, counts, partials)):
                    if count == 0:
                        continue
                    walk = self._make_walk(np.random.default_rng(seed))
                    futures.append(
                        pool.submit(
                            walk.run,
                            Plot(self.axes, partial),
                            count,
                            cfg.chunk_size,
                            tracker.for_worker(i),
                            cancel,
                        )
                    )
                for future in futures:
                    future.result()

            for partial in partials:
                plot.canvas.merge(partial)
        finally:
            for partial in partials:
                partial.close()

    def render(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        cancel=None,
        keep_accum: bool = False,
    ) -> RenderResult:
        """
        Full pipeline: accumulate, decorate, tone-map.

        Args:
            progress_callback: Optional callback(current_sample, total_samples).
            cancel: Optional flag with ``is_set()``, polled between chunks.
            keep_accum: Copy the raw accumulation statistics into the result.

        Raises:
            CanvasAllocationError: If the canvas cannot be allocated.
            RenderCancelled: If ``cancel`` was set during the walk.
        """
        cfg = self.cfg
        with Canvas(cfg.width, cfg.height) as canvas:
            plot = self.accumulate(canvas, progress_callback, cancel)

            if cfg.circles_enabled:
                draw_circles(plot, cfg.circles, cfg.circle_points)

            largest = log_density_normalize(canvas)

            return RenderResult(
                image=canvas.to_image().copy(),
                largest_hit_count=largest,
                hit_total=canvas.hit_total,
                samples=cfg.samples,
                accum=canvas.accum.copy() if keep_accum else None,
            )
