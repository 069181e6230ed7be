from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from torusmarch.math_utils import matvec_batch, normalize_batch
from torusmarch.raymarch.config import (
    HitScene,
    MissedScene,
    Ray,
    RaymarchOptions,
    RenderResult,
)
from torusmarch.raymarch.marcher import DEFAULT_OPTIONS, ImageMarcher, raymarch
from torusmarch.vector import Mat3, Vec3

if TYPE_CHECKING:
    from torusmarch.backend import ArrayModule
    from torusmarch.protocols import SDF, SceneFn


@dataclass(frozen=True, slots=True)
class Camera3D:
    """Pinhole camera with unit focal distance and no explicit FOV.

    Pixel ``(x_pixel, y_pixel)`` looks along ``basis @ normalize((x, y, 1))``
    with ``x = x_pixel / width - 0.5`` and ``y = y_pixel / height - 0.5``, so
    the field of view follows from the grid size alone. Result grids are
    indexed ``[y_pixel][x_pixel]``.
    """

    width: int
    height: int
    origin: Vec3 = field(default_factory=Vec3.zero)
    basis: Mat3 = field(default_factory=Mat3.identity)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"Camera grid must be non-empty, got {self.width}x{self.height}"
            raise ValueError(msg)

    def ray_direction(self, x_pixel: int, y_pixel: int) -> Vec3:
        x = x_pixel / self.width - 0.5
        y = y_pixel / self.height - 0.5
        return self.basis @ Vec3(x, y, 1.0).normalize()

    def ray(self, x_pixel: int, y_pixel: int) -> Ray:
        return Ray(origin=self.origin, direction=self.ray_direction(x_pixel, y_pixel))

    def render(self, scene_fn: SceneFn, options: RaymarchOptions = DEFAULT_OPTIONS) -> RenderResult:
        """March one ray per pixel and reduce each outcome into the grids.

        Misses record ``+inf`` depth, exhausted rays record ``NaN`` depth; both
        record the nearest distance seen as proximity. Hits record depth and
        normal and leave proximity at 0.
        """
        out = RenderResult.empty(self.width, self.height)

        for y_pixel in range(self.height):
            for x_pixel in range(self.width):
                result = raymarch(self.ray(x_pixel, y_pixel), scene_fn, options)

                if isinstance(result, HitScene):
                    out.depth[y_pixel, x_pixel] = result.depth
                    out.normal[y_pixel, x_pixel] = list(result.normal)
                elif isinstance(result, MissedScene):
                    out.depth[y_pixel, x_pixel] = math.inf
                    out.proximity[y_pixel, x_pixel] = result.nearest_distance
                else:
                    out.depth[y_pixel, x_pixel] = math.nan
                    out.proximity[y_pixel, x_pixel] = result.nearest_distance

        return out

    def ray_directions_grid(self, xp: ArrayModule) -> Any:
        """Return rd0 of shape (H, W, 3), normalized, matching ``ray_direction``."""
        xs = xp.arange(self.width, dtype=xp.float64) / self.width - 0.5
        ys = xp.arange(self.height, dtype=xp.float64) / self.height - 0.5

        rd = xp.empty((self.height, self.width, 3), dtype=xp.float64)
        rd[..., 0] = xs[None, :]
        rd[..., 1] = ys[:, None]
        rd[..., 2] = 1.0

        basis = xp.asarray(self.basis.to_numpy())
        return matvec_batch(xp, basis, normalize_batch(xp, rd))

    def render_batch(
            self,
            scene: SDF,
            options: RaymarchOptions = DEFAULT_OPTIONS,
            xp: ArrayModule | None = None,
    ) -> RenderResult:
        """Same grids as :meth:`render`, marched for all pixels at once."""
        if xp is None:
            xp = getattr(scene, "xp", np)

        marcher = ImageMarcher(xp=xp, options=options)
        return marcher.march(self.origin, self.ray_directions_grid(xp), scene).to_render_result()

    @classmethod
    def look_at(
            cls,
            origin: Vec3,
            target: Vec3,
            width: int,
            height: int,
            up: Vec3 = Vec3(0.0, 1.0, 0.0),  # noqa: B008
    ) -> Camera3D:
        """Orient the camera so its +z axis points from ``origin`` at ``target``."""
        forward = (target - origin).normalize()
        right = up.cross(forward).normalize()
        true_up = forward.cross(right)
        return cls(
            width=width,
            height=height,
            origin=origin,
            basis=Mat3.from_columns(right, true_up, forward),
        )
