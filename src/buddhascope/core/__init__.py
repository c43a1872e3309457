"""
Coordinate mapping, accumulation and tone mapping.
"""

from buddhascope.core.canvas import Canvas, CanvasAllocationError
from buddhascope.core.density import largest_hit_count, log_density_normalize
from buddhascope.core.orbit import ColorWeights, JuliaWalk, RenderCancelled, forward_orbit
from buddhascope.core.plane import Axes, Plane
from buddhascope.core.plot import Plot
