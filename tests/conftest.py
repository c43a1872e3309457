"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from buddhascope.core.canvas import Canvas
from buddhascope.core.plane import Axes
from buddhascope.core.plot import Plot


@pytest.fixture
def small_canvas():
    """4x4 canvas, closed after the test."""
    with Canvas(4, 4) as canvas:
        yield canvas


@pytest.fixture
def unit_plot(small_canvas) -> Plot:
    """4x4 canvas viewing [-1, 1] x [-1, 1]."""
    return Plot(Axes.from_point(0j, 1.0), small_canvas)


@pytest.fixture
def wide_plot():
    """
    64x48 canvas viewing a radius-10 square around the origin.

    Wide enough that every point of the Julia walk itself stays in view.
    """
    with Canvas(64, 48) as canvas:
        yield Plot(Axes.from_point(0j, 10.0), canvas)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
