"""
Viewport geometry for the complex plane.

An ``Axes`` is the raw rectangle requested by the caller; a ``Plane`` is that
rectangle grown (never cropped) to the raster's aspect ratio, together with
the per-pixel step sizes used by the point mapper.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Axes:
    """Rectangular region of the complex plane."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @classmethod
    def from_point(cls, center: complex, radius: float) -> "Axes":
        """Square region of half-width ``radius`` around ``center``."""
        center = complex(center)
        return cls(
            xmin=center.real - radius,
            xmax=center.real + radius,
            ymin=center.imag - radius,
            ymax=center.imag + radius,
        )

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> complex:
        return complex((self.xmin + self.xmax) / 2.0, (self.ymin + self.ymax) / 2.0)


@dataclass(frozen=True)
class Plane:
    """Aspect-corrected axes plus the step size of one pixel on each axis."""

    axes: Axes
    xstep: float
    ystep: float

    @classmethod
    def create(cls, axes: Axes, width: int, height: int) -> "Plane":
        """
        Fit ``axes`` to a ``width`` x ``height`` raster.

        The narrower axis is enlarged symmetrically about its center until
        both aspect ratios agree.

        Raises:
            ValueError: If the raster size or an axis span is not positive.
        """
        awidth = axes.xmax - axes.xmin
        aheight = axes.ymax - axes.ymin

        if width <= 0 or height <= 0:
            raise ValueError(f"raster size must be positive, got {width}x{height}")
        if not (awidth > 0.0 and aheight > 0.0):
            raise ValueError(f"axis spans must be positive, got {awidth} x {aheight}")

        xmin, xmax, ymin, ymax = axes.xmin, axes.xmax, axes.ymin, axes.ymax

        daspect = abs(height / width)
        waspect = abs(aheight / awidth)

        if daspect > waspect:
            excess = aheight * (daspect / waspect - 1.0)
            ymax += excess / 2.0
            ymin -= excess / 2.0
        elif daspect < waspect:
            excess = awidth * (waspect / daspect - 1.0)
            xmax += excess / 2.0
            xmin -= excess / 2.0

        fitted = Axes(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)
        return cls(
            axes=fitted,
            xstep=(xmax - xmin) / width,
            ystep=(ymax - ymin) / height,
        )

    def pixel_center(self, x: int, y: int) -> complex:
        """Complex value at the middle of pixel ``(x, y)``. Row 0 is the top."""
        return complex(
            self.axes.xmin + (x + 0.5) * self.xstep,
            self.axes.ymax - (y + 0.5) * self.ystep,
        )
