from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from torusmarch.backend import ArrayModule
from torusmarch.protocols import Scene
from torusmarch.vector import Vec2, Vec3


def torus(pos: Vec3, origin: Vec3, normal: Vec3, major_radius: float, minor_radius: float) -> float:
    """Exact signed distance to a torus.

    The ring is centred at ``origin`` and lies in the plane perpendicular to
    ``normal``. ``normal`` has to be unit length; a non-unit normal skews the
    field and is not checked.
    """
    p = pos - origin
    along = p.dot(normal)
    in_plane = p - normal * along
    return Vec2(in_plane.length() - major_radius, along).length() - minor_radius


@dataclass(frozen=True, slots=True)
class TorusSDF(Scene):
    """Torus distance field evaluable per point or over (..., 3) arrays."""

    origin: Vec3
    normal: Vec3
    major_radius: float
    minor_radius: float
    xp: ArrayModule = np

    def __call__(self, p: Vec3) -> float:
        return torus(p, self.origin, self.normal, self.major_radius, self.minor_radius)

    def sdf(self, p: Any) -> Any:
        xp = self.xp
        o = xp.asarray(list(self.origin), dtype=xp.float64)
        n = xp.asarray(list(self.normal), dtype=xp.float64)

        q = p - o
        along = xp.sum(q * n, axis=-1)
        in_plane = q - along[..., None] * n
        ring = xp.sqrt(xp.sum(in_plane * in_plane, axis=-1)) - self.major_radius
        return xp.sqrt(ring * ring + along * along) - self.minor_radius

    def surface_point(self, ring_angle: float, tube_angle: float) -> Vec3:
        """Point on the surface, parametrised by the angle around the ring and around the tube."""
        n = self.normal
        helper = Vec3(1.0, 0.0, 0.0) if abs(n.x) < 0.9 else Vec3(0.0, 1.0, 0.0)  # noqa: PLR2004
        u = (helper - helper.project_onto(n)).normalize()
        v = n.cross(u)

        radial = u * math.cos(ring_angle) + v * math.sin(ring_angle)
        centre = self.origin + radial * self.major_radius
        return (
            centre
            + radial * (self.minor_radius * math.cos(tube_angle))
            + n * (self.minor_radius * math.sin(tube_angle))
        )
