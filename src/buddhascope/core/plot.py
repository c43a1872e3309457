"""
Point mapper: complex values -> canvas cells.

The viewport is fitted to ``width - 1`` x ``height - 1`` while bounds are
checked against the full canvas, leaving a one-pixel margin at the right and
bottom edges. Coordinates are truncated toward zero, so a value a fraction of
a pixel outside the left/top edge still lands on column/row 0.

The per-point kernels are compiled with Numba and shared with the orbit
sample loop in ``buddhascope.core.orbit``.
"""

from typing import Optional, Sequence, Tuple

import numba
import numpy as np

from buddhascope.core.canvas import Canvas
from buddhascope.core.plane import Axes, Plane


@numba.njit(cache=True, nogil=True)
def map_point(
    re: float,
    im: float,
    xmin: float,
    ymax: float,
    xstep: float,
    ystep: float,
    width: int,
    height: int,
) -> Tuple[int, int]:
    """Pixel (x, y) for a complex value, or (-1, -1) when it misses the raster.

    NaN and infinite inputs fail every comparison and miss.
    """
    fx = (re - xmin) / xstep
    fy = (ymax - im) / ystep
    if fx > -1.0 and fx < width and fy > -1.0 and fy < height:
        return int(fx), int(fy)
    return -1, -1


@numba.njit(cache=True, nogil=True)
def accumulate_point(
    accum: np.ndarray,
    re: float,
    im: float,
    red: float,
    green: float,
    blue: float,
    xmin: float,
    ymax: float,
    xstep: float,
    ystep: float,
) -> None:
    """Add one weighted hit to the cell under (re, im), if any."""
    x, y = map_point(re, im, xmin, ymax, xstep, ystep, accum.shape[1], accum.shape[0])
    if x >= 0:
        accum[y, x, 0] += red
        accum[y, x, 1] += green
        accum[y, x, 2] += blue
        accum[y, x, 3] += 1.0


@numba.njit(cache=True, nogil=True)
def _add_with_carry(rgb: np.ndarray, x: int, y: int, amount: int) -> None:
    # red -> green -> blue; a channel too close to 255 saturates and passes
    # the whole amount on to the next one
    for ch in range(3):
        value = int(rgb[y, x, ch])
        if value < 255 - amount:
            rgb[y, x, ch] = value + amount
            return
        rgb[y, x, ch] = 255


class Plot:
    """Binds a viewport to a canvas and writes complex points into it."""

    def __init__(self, axes: Axes, canvas: Canvas):
        self.canvas = canvas
        self.plane = Plane.create(axes, canvas.width - 1, canvas.height - 1)

    @property
    def params(self) -> Tuple[float, float, float, float]:
        """(xmin, ymax, xstep, ystep) in the order the kernels expect."""
        return (self.plane.axes.xmin, self.plane.axes.ymax, self.plane.xstep, self.plane.ystep)

    def pixel(self, z: complex) -> Optional[Tuple[int, int]]:
        """Canvas cell (x, y) under ``z``, or None when it falls outside."""
        xmin, ymax, xstep, ystep = self.params
        x, y = map_point(z.real, z.imag, xmin, ymax, xstep, ystep, self.canvas.width, self.canvas.height)
        if x < 0:
            return None
        return x, y

    def accumulate(self, z: complex, weights) -> bool:
        """
        Add ``weights`` (anything with red/green/blue) to the cell under ``z``.

        Points outside the canvas are dropped. Always returns True: missing
        the raster is a normal outcome of a statistical sample, not an error.
        """
        xmin, ymax, xstep, ystep = self.params
        accumulate_point(
            self.canvas.accum,
            z.real, z.imag,
            float(weights.red), float(weights.green), float(weights.blue),
            xmin, ymax, xstep, ystep,
        )
        return True

    def write_direct(self, z: complex, rgb: Sequence[int]) -> bool:
        """Overwrite the display bytes under ``z``. Returns whether it landed."""
        cell = self.pixel(z)
        if cell is None:
            return False
        x, y = cell
        self.canvas.rgb[y, x] = rgb
        return True

    def saturating_add(self, z: complex, amount: int = 3) -> bool:
        """Heat-map write: bump the display bytes under ``z`` with carry.

        Always returns True, whether or not the point landed.
        """
        if not 0 <= amount <= 255:
            raise ValueError(f"amount must be in [0, 255], got {amount}")
        cell = self.pixel(z)
        if cell is not None:
            x, y = cell
            _add_with_carry(self.canvas.rgb, x, y, int(amount))
        return True
