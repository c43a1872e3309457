"""
Buddhascope: multi-Julia inverse-iteration density rendering.
"""

from buddhascope.core.canvas import Canvas, CanvasAllocationError
from buddhascope.core.density import largest_hit_count, log_density_normalize
from buddhascope.core.orbit import ColorWeights, JuliaWalk, forward_orbit
from buddhascope.core.plane import Axes, Plane
from buddhascope.core.plot import Plot
from buddhascope.decorations import circle, draw_circles
from buddhascope.io.image import ImageWriteError, save_image, write_ppm
from buddhascope.renderer import BuddhaRenderer, RenderCancelled, RenderConfig, RenderResult

__version__ = "0.1.0"
