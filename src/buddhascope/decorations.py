"""
Guide overlays drawn straight into the display bytes.

Decorations bypass the accumulation buffer. Any cell that also collected
orbit hits is overwritten later by the density normalizer.
"""

import math
from typing import Iterable, Sequence, Tuple

from buddhascope.core.plot import Plot

WHITE = (255, 255, 255)

# (center, radius): the unit circle plus four radius-2 circles touching it
DEFAULT_CIRCLES: Tuple[Tuple[complex, float], ...] = (
    (0j, 1.0),
    (2 + 0j, 2.0),
    (-2 + 0j, 2.0),
    (2j, 2.0),
    (-2j, 2.0),
)


def circle(
    plot: Plot,
    center: complex,
    radius: float,
    n: int = 2048,
    rgb: Sequence[int] = WHITE,
) -> int:
    """Plot ``n`` evenly spaced points of a circle. Returns how many landed."""
    center = complex(center)
    abase = 2.0 * math.pi / n
    written = 0
    for i in range(n):
        angle = abase * i
        z = complex(center.real + math.cos(angle) * radius, center.imag + math.sin(angle) * radius)
        if plot.write_direct(z, rgb):
            written += 1
    return written


def draw_circles(
    plot: Plot,
    circles: Iterable[Tuple[complex, float]] = DEFAULT_CIRCLES,
    n: int = 2048,
) -> int:
    return sum(circle(plot, complex(center), radius, n) for center, radius in circles)
