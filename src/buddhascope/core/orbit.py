"""
Orbit engine.

A random walk over three Julia parameters driven by inverse iteration: each
sample picks a parameter ``c``, steps to one of the two preimages
``±sqrt(z - c)`` of the current point and, once past the warm-up, drops a
short forward orbit of the current point into the accumulation buffer.

Inverse iteration concentrates on the Julia-set boundaries, which is what
gives the density image its structure. Each Julia branch and each root
choice blends the running color weights toward a fixed per-channel target,
so every region of the image carries its own color signature.

The sample loop runs as a compiled Numba kernel over chunks of random draws
taken from an explicitly owned ``numpy.random.Generator``; the draws are
consumed strictly in order, so output depends only on the seed and the
sample count, not on the chunk size.
"""

import cmath
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numba
import numpy as np

from buddhascope.core.plot import Plot, accumulate_point

DEFAULT_JULIA_POINTS = (1 + 1j, -1 - 1j, 0 + 2j)
DEFAULT_WARMUP = 100
DEFAULT_SUB_ORBIT_STEPS = 3

# Blend target shared by every branch rule
_BLEND = 0.681


class RenderCancelled(RuntimeError):
    """A walk was stopped through its cancel flag."""


@dataclass
class ColorWeights:
    """Running red/green/blue contribution of the next accumulated point."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.red, self.green, self.blue], dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> "ColorWeights":
        return cls(float(values[0]), float(values[1]), float(values[2]))


@numba.njit(cache=True, nogil=True)
def _forward_orbit_kernel(
    accum: np.ndarray,
    z: complex,
    c: complex,
    steps: int,
    xmin: float,
    ymax: float,
    xstep: float,
    ystep: float,
) -> complex:
    red = 0.0
    green = 0.0
    blue = 0.0
    for i in range(steps):
        z = z * z + c

        if i == 0:
            red = (_BLEND + red) / 2.0
            blue = (0.581 + blue) / 2.0
        elif i == 1:
            green = (_BLEND + green) / 2.0
            blue = (0.781 + blue) / 2.0
        else:
            blue = (_BLEND + blue) / 2.0

        accumulate_point(accum, z.real, z.imag, red, green, blue, xmin, ymax, xstep, ystep)
    return z


@numba.njit(cache=True, nogil=True)
def _walk_kernel(
    accum: np.ndarray,
    draws: np.ndarray,
    julia: np.ndarray,
    z: complex,
    weights: np.ndarray,
    start: int,
    warmup: int,
    sub_orbit_steps: int,
    xmin: float,
    ymax: float,
    xstep: float,
    ystep: float,
) -> complex:
    """Run ``len(draws)`` samples. ``weights`` is updated in place."""
    red = weights[0]
    green = weights[1]
    blue = weights[2]

    for k in range(draws.shape[0]):
        rn0 = draws[k, 0]
        rn1 = draws[k, 1]

        if rn0 < 1.0 / 3.0:
            c = julia[0]
            blue = 0.0
            red = (_BLEND + red) / 2.0
            green = (_BLEND + green) / 2.0
        elif rn0 < 2.0 / 3.0:
            c = julia[1]
            green = 0.0
            red = (_BLEND + red) / 2.0
            blue = (_BLEND + blue) / 2.0
        else:
            c = julia[2]
            red /= 0.5
            green = (_BLEND + green) / 2.0
            blue = (_BLEND + blue) / 2.0

        root = cmath.sqrt(z - c)

        if start + k > warmup:
            # the current point is its own parameter here
            _forward_orbit_kernel(accum, z, z, sub_orbit_steps, xmin, ymax, xstep, ystep)
            accumulate_point(accum, z.real, z.imag, red, green, blue, xmin, ymax, xstep, ystep)

        if rn1 > 0.5:
            z = -root
            blue = 0.0
            red = (_BLEND + red) / 2.0
        else:
            z = root
            red = 0.0
            blue = (_BLEND + blue) / 2.0

    weights[0] = red
    weights[1] = green
    weights[2] = blue
    return z


def forward_orbit(plot: Plot, z: complex, c: complex, steps: int = DEFAULT_SUB_ORBIT_STEPS) -> complex:
    """
    Iterate ``z -> z**2 + c`` for ``steps`` steps, accumulating every iterate.

    The color starts from black on each call and is blended per step index:
    step 0 pulls red and blue, step 1 green and blue, later steps blue only.

    Returns:
        The last iterate.
    """
    xmin, ymax, xstep, ystep = plot.params
    return complex(
        _forward_orbit_kernel(plot.canvas.accum, complex(z), complex(c), int(steps), xmin, ymax, xstep, ystep)
    )


class JuliaWalk:
    """
    Inverse-iteration walk between three Julia parameters.

    Holds the walk state (current point, color weights, samples taken so
    far) so a long render can be fed to ``run`` in several calls.
    """

    def __init__(
        self,
        julia_points: Sequence[complex] = DEFAULT_JULIA_POINTS,
        rng: Optional[np.random.Generator] = None,
        warmup: int = DEFAULT_WARMUP,
        sub_orbit_steps: int = DEFAULT_SUB_ORBIT_STEPS,
    ):
        if len(julia_points) != 3:
            raise ValueError(f"expected 3 Julia parameters, got {len(julia_points)}")
        if warmup < 0:
            raise ValueError("warmup must be non-negative")
        if sub_orbit_steps < 0:
            raise ValueError("sub_orbit_steps must be non-negative")

        self.julia = np.asarray(julia_points, dtype=np.complex128)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.warmup = int(warmup)
        self.sub_orbit_steps = int(sub_orbit_steps)

        self.z: complex = 0j
        self.weights = ColorWeights()
        self.samples_done = 0

    def run(
        self,
        plot: Plot,
        samples: int,
        chunk_size: int = 65536,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        cancel=None,
    ) -> int:
        """
        Take ``samples`` walk steps, accumulating into ``plot``.

        Args:
            plot: Target point mapper.
            samples: Number of samples to take.
            chunk_size: Samples per compiled call. Does not affect the result.
            progress_callback: Optional callback(current, total), called at
                roughly every third of the run and once at the end.
            cancel: Optional flag with ``is_set()`` (e.g. threading.Event),
                polled between chunks.

        Returns:
            Number of samples taken.

        Raises:
            RenderCancelled: If ``cancel`` was set before the run finished.
        """
        if samples <= 0:
            raise ValueError(f"samples must be positive, got {samples}")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        accum = plot.canvas.accum
        xmin, ymax, xstep, ystep = plot.params
        weights = self.weights.as_array()
        third = max(samples // 3, 1)

        done = 0
        try:
            while done < samples:
                if cancel is not None and cancel.is_set():
                    raise RenderCancelled(f"cancelled after {done} of {samples} samples")

                if progress_callback is not None and done % third == 0:
                    progress_callback(done + 1, samples)

                # never step over a progress checkpoint
                end = min(samples, done + chunk_size, (done // third + 1) * third)
                draws = self.rng.random((end - done, 2))

                self.z = complex(
                    _walk_kernel(
                        accum, draws, self.julia, self.z, weights,
                        self.samples_done, self.warmup, self.sub_orbit_steps,
                        xmin, ymax, xstep, ystep,
                    )
                )
                self.samples_done += end - done
                done = end
        finally:
            self.weights = ColorWeights.from_array(weights)

        if progress_callback is not None:
            progress_callback(samples, samples)

        return done
