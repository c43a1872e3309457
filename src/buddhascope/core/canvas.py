"""
Accumulation buffer.

A canvas holds two row-major rasters of the same size:

- ``rgb``   (H, W, 3) uint8   display bytes, written by decorations, the
  saturating heat-map path and the density normalizer.
- ``accum`` (H, W, 4) float64 running (red_sum, green_sum, blue_sum, hits)
  statistics. Every field only ever grows while orbits are accumulated.

The canvas is owned by one render session and released with ``close()`` or
by leaving a ``with`` block.
"""

from typing import Optional

import numpy as np

# Channel layout of Canvas.accum
RED, GREEN, BLUE, HITS = 0, 1, 2, 3


class CanvasAllocationError(MemoryError):
    """The accumulation buffer could not be allocated."""


class Canvas:
    """Fixed-size raster of display bytes plus accumulation statistics."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)

        try:
            self._rgb: Optional[np.ndarray] = np.zeros((self.height, self.width, 3), dtype=np.uint8)
            self._accum: Optional[np.ndarray] = np.zeros((self.height, self.width, 4), dtype=np.float64)
        except (MemoryError, ValueError) as exc:
            self._rgb = None
            self._accum = None
            raise CanvasAllocationError(
                f"cannot allocate a {self.width}x{self.height} canvas: {exc}"
            ) from exc

    def __enter__(self) -> "Canvas":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Canvas({self.width}x{self.height}, {state})"

    @property
    def closed(self) -> bool:
        return self._accum is None

    def close(self) -> None:
        """Release the buffers. Calling it again does nothing."""
        self._rgb = None
        self._accum = None

    @property
    def rgb(self) -> np.ndarray:
        if self._rgb is None:
            raise RuntimeError("canvas has been closed")
        return self._rgb

    @property
    def accum(self) -> np.ndarray:
        if self._accum is None:
            raise RuntimeError("canvas has been closed")
        return self._accum

    @property
    def hit_total(self) -> float:
        """Number of accumulate calls that landed on the canvas."""
        return float(self.accum[..., HITS].sum())

    def merge(self, other: "Canvas") -> None:
        """Add another canvas's accumulation statistics into this one."""
        if (other.width, other.height) != (self.width, self.height):
            raise ValueError(
                f"cannot merge {other.width}x{other.height} canvas into "
                f"{self.width}x{self.height} canvas"
            )
        np.add(self.accum, other.accum, out=self.accum)

    def to_image(self) -> np.ndarray:
        """Display bytes as a contiguous (H, W, 3) uint8 array."""
        return np.ascontiguousarray(self.rgb)
