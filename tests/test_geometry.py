"""Tests for geometry.py: the torus distance field, scalar and batched."""

import math

import numpy as np
import numpy.testing as npt
import pytest

from torusmarch.geometry import TorusSDF, torus
from torusmarch.vector import Vec3


NORMALS = [
    Vec3(0.0, 0.0, 1.0),
    Vec3(0.0, 1.0, 0.0),
    Vec3(1.0, 0.0, 0.0),
    Vec3(1.0, 2.0, -0.5).normalize(),
]


def _torus(normal=Vec3(0.0, 0.0, 1.0), origin=Vec3(0.0, 0.0, 10.0)):
    return TorusSDF(origin=origin, normal=normal, major_radius=3.0, minor_radius=1.0)


class TestTorusScalar:
    def test_centre_of_ring(self):
        # Centre is major - minor away from the tube.
        assert torus(Vec3(0.0, 0.0, 10.0), Vec3(0.0, 0.0, 10.0), Vec3(0.0, 0.0, 1.0), 3.0, 1.0) == 2.0

    def test_on_axis(self):
        d = torus(Vec3(0.0, 0.0, 14.0), Vec3(0.0, 0.0, 10.0), Vec3(0.0, 0.0, 1.0), 3.0, 1.0)
        npt.assert_allclose(d, 5.0 - 1.0)

    def test_inside_tube(self):
        d = torus(Vec3(3.0, 0.0, 10.0), Vec3(0.0, 0.0, 10.0), Vec3(0.0, 0.0, 1.0), 3.0, 1.0)
        assert d == -1.0

    def test_outside_in_plane(self):
        d = torus(Vec3(6.0, 0.0, 10.0), Vec3(0.0, 0.0, 10.0), Vec3(0.0, 0.0, 1.0), 3.0, 1.0)
        npt.assert_allclose(d, 2.0)

    def test_ring_perpendicular_to_normal(self):
        # Ring in the xz plane: (0, 0, 7) lies on the ring centre line.
        d = torus(Vec3(0.0, 0.0, 7.0), Vec3(0.0, 0.0, 10.0), Vec3(0.0, 1.0, 0.0), 3.0, 1.0)
        npt.assert_allclose(d, -1.0)

    @pytest.mark.parametrize("normal", NORMALS)
    def test_surface_points_are_zero(self, normal):
        t = _torus(normal=normal, origin=Vec3(0.5, -1.0, 4.0))
        for ring_angle in np.linspace(0.0, 2.0 * math.pi, 13):
            for tube_angle in np.linspace(0.0, 2.0 * math.pi, 9):
                p = t.surface_point(float(ring_angle), float(tube_angle))
                assert abs(t(p)) < 1e-5

    def test_callable_matches_function(self):
        t = _torus()
        p = Vec3(1.0, -2.0, 9.0)
        assert t(p) == torus(p, t.origin, t.normal, t.major_radius, t.minor_radius)


class TestTorusBatch:
    @pytest.mark.parametrize("normal", NORMALS)
    def test_matches_scalar(self, normal):
        t = _torus(normal=normal)
        rng = np.random.default_rng(7)
        pts = rng.uniform(-6.0, 16.0, size=(5, 7, 3))

        expected = np.array([[t(Vec3.from_iterable(p)) for p in row] for row in pts])
        npt.assert_allclose(t.sdf(pts), expected, rtol=1e-12, atol=1e-12)

    def test_shape(self):
        pts = np.zeros((4, 3, 3))
        assert _torus().sdf(pts).shape == (4, 3)
