"""Tests for viewport fitting."""

import pytest

from buddhascope.core.plane import Axes, Plane


class TestAxes:
    def test_from_point_square(self):
        axes = Axes.from_point(1 - 2j, 0.5)
        assert (axes.xmin, axes.xmax, axes.ymin, axes.ymax) == (0.5, 1.5, -2.5, -1.5)

    def test_center(self):
        axes = Axes.from_point(0.25 + 0.75j, 3.0)
        assert axes.center == pytest.approx(0.25 + 0.75j)

    def test_immutable(self):
        axes = Axes.from_point(0j, 1.0)
        with pytest.raises(AttributeError):
            axes.xmin = 5.0


class TestPlane:
    @pytest.mark.parametrize("width,height", [(1920, 1080), (1080, 1920), (3, 7), (640, 360)])
    def test_aspect_matches_raster(self, width, height):
        plane = Plane.create(Axes.from_point(0j, 2.0), width, height)
        axes = plane.axes
        assert axes.height / axes.width == pytest.approx(height / width)

    @pytest.mark.parametrize("width,height", [(1920, 1080), (1080, 1920), (5, 2)])
    def test_center_preserved(self, width, height):
        original = Axes(xmin=-3.0, xmax=1.0, ymin=0.5, ymax=2.0)
        plane = Plane.create(original, width, height)
        assert plane.axes.center.real == pytest.approx(original.center.real)
        assert plane.axes.center.imag == pytest.approx(original.center.imag)

    def test_never_crops(self):
        original = Axes.from_point(0j, 2.0)
        plane = Plane.create(original, 1920, 1080)
        assert plane.axes.xmin <= original.xmin
        assert plane.axes.xmax >= original.xmax
        assert plane.axes.ymin == original.ymin
        assert plane.axes.ymax == original.ymax

    def test_tall_raster_grows_y(self):
        original = Axes.from_point(0j, 1.0)
        plane = Plane.create(original, 100, 200)
        assert plane.axes.xmin == original.xmin
        assert plane.axes.ymax - plane.axes.ymin == pytest.approx(4.0)

    def test_matching_aspect_unchanged(self):
        original = Axes.from_point(0j, 1.0)
        plane = Plane.create(original, 10, 10)
        assert plane.axes == original

    def test_steps(self):
        plane = Plane.create(Axes.from_point(0j, 1.0), 4, 8)
        assert plane.xstep == pytest.approx(2.0 / 4)
        assert plane.ystep == pytest.approx(4.0 / 8)
        assert plane.xstep > 0 and plane.ystep > 0

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_non_positive_raster(self, width, height):
        with pytest.raises(ValueError):
            Plane.create(Axes.from_point(0j, 1.0), width, height)

    def test_rejects_empty_axes(self):
        with pytest.raises(ValueError):
            Plane.create(Axes(xmin=1.0, xmax=1.0, ymin=0.0, ymax=1.0), 10, 10)
        with pytest.raises(ValueError):
            Plane.create(Axes(xmin=0.0, xmax=1.0, ymin=2.0, ymax=1.0), 10, 10)

    def test_pixel_center_top_left(self):
        plane = Plane.create(Axes.from_point(0j, 1.0), 2, 2)
        assert plane.pixel_center(0, 0) == pytest.approx(-0.5 + 0.5j)
        assert plane.pixel_center(1, 1) == pytest.approx(0.5 - 0.5j)
