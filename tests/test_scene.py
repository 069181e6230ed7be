"""Tests for scene.py: the time-varying rotation around a primitive."""

import math

import numpy as np
import numpy.testing as npt
import pytest

from torusmarch.geometry import TorusSDF
from torusmarch.scene import DEFAULT_CENTER, AnimatedScene, default_scene
from torusmarch.vector import Mat3, Vec3


def _points(n=20, seed=3):
    rng = np.random.default_rng(seed)
    return [Vec3.from_iterable(p) for p in rng.uniform(-5.0, 15.0, size=(n, 3))]


class TestAnimatedScene:
    def test_time_zero_is_primitive(self):
        scene = default_scene()
        for p in _points():
            npt.assert_allclose(scene(p), scene.primitive(p), atol=1e-12)

    def test_at_returns_new_scene(self):
        scene = default_scene()
        later = scene.at(1.5)
        assert later.time == 1.5
        assert scene.time == 0.0
        assert later.primitive is scene.primitive

    def test_rotation_moves_primitive(self):
        # Spinning a quarter turn about z carries the torus normal from +y to -x.
        base = TorusSDF(origin=DEFAULT_CENTER, normal=Vec3(0.0, 1.0, 0.0), major_radius=3.0, minor_radius=1.0)
        scene = AnimatedScene(primitive=base, pivot=DEFAULT_CENTER, spin=Vec3(0.0, 0.0, 1.0)).at(math.pi / 2.0)
        turned = TorusSDF(origin=DEFAULT_CENTER, normal=Vec3(-1.0, 0.0, 0.0), major_radius=3.0, minor_radius=1.0)
        for p in _points():
            npt.assert_allclose(scene(p), turned(p), atol=1e-9)

    def test_rotated_points_keep_distance(self):
        scene = default_scene().at(0.8)
        rotation = scene.rotation()
        pivot = scene.pivot
        for p in _points():
            moved = pivot + rotation @ (p - pivot)
            npt.assert_allclose(scene(moved), scene.primitive(p), atol=1e-9)

    def test_rotation_matches_spin(self):
        scene = default_scene().at(2.0)
        expected = Mat3.from_euler(2.0, 1.0, 0.0)
        npt.assert_allclose(scene.rotation().to_numpy(), expected.to_numpy(), atol=1e-12)

    def test_batch_matches_scalar(self):
        scene = default_scene().at(0.37)
        pts = np.array([list(p) for p in _points(12)]).reshape(3, 4, 3)
        expected = np.array([[scene(Vec3.from_iterable(p)) for p in row] for row in pts])
        npt.assert_allclose(scene.sdf(pts), expected, atol=1e-9)

    def test_batch_requires_array_primitive(self):
        scene = AnimatedScene(primitive=lambda p: p.length() - 1.0, pivot=Vec3.zero(), spin=Vec3.zero())
        assert scene(Vec3(2.0, 0.0, 0.0)) == 1.0
        with pytest.raises(TypeError):
            scene.sdf(np.zeros((1, 3)))
