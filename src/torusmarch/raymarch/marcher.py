from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from torusmarch.backend import to_numpy
from torusmarch.math_utils import normalize_batch
from torusmarch.raymarch.config import (
    HitScene,
    MissedScene,
    RaymarchOptions,
    RaymarchResult,
    ReachedMaxIterations,
    RenderResult,
)
from torusmarch.vector import Vec3

if TYPE_CHECKING:
    from torusmarch.backend import ArrayModule
    from torusmarch.protocols import SDF, SceneFn
    from torusmarch.raymarch.config import Ray

STATUS_MISSED = 0
STATUS_MAX_ITERATIONS = 1
STATUS_HIT = 2

DEFAULT_OPTIONS = RaymarchOptions()


def raymarch(ray: Ray, scene_fn: SceneFn, options: RaymarchOptions = DEFAULT_OPTIONS) -> RaymarchResult:
    """Sphere-trace ``ray`` through ``scene_fn``.

    Each iteration samples the field at the current depth, folds the sample
    into the running minimum, then checks for a miss (``depth > far_clip``)
    before checking for a hit (``distance < epsilon``). Neither check firing
    advances the ray by the sampled distance.
    """
    depth = 0.0
    nearest_distance = options.far_clip

    for i in range(options.max_iterations):
        scene_pos = ray.at(depth)
        scene_distance = scene_fn(scene_pos)
        nearest_distance = min(nearest_distance, scene_distance)

        if depth > options.far_clip:
            return MissedScene(iterations=i, nearest_distance=nearest_distance)

        if scene_distance < options.epsilon:
            return HitScene(
                iterations=i,
                depth=depth,
                normal=_surface_normal(scene_fn, scene_pos, options.normal_epsilon),
            )

        depth += scene_distance

    return ReachedMaxIterations(nearest_distance=nearest_distance)


def _surface_normal(scene_fn: SceneFn, p: Vec3, h: float) -> Vec3:
    # One forward sample per axis. Near the surface f(p) is ~0, so the raw
    # samples already point along the gradient.
    x = scene_fn(p + Vec3(h, 0.0, 0.0))
    y = scene_fn(p + Vec3(0.0, h, 0.0))
    z = scene_fn(p + Vec3(0.0, 0.0, h))
    return Vec3(x, y, z).normalize()


@dataclass(frozen=True, slots=True)
class ImageMarchResult:
    """Lane-wise outcome of an image march.

    Attributes
    ----------
    status:
        (H, W) codes, one of STATUS_MISSED, STATUS_MAX_ITERATIONS, STATUS_HIT.
    iterations:
        (H, W) terminating iteration index; ``max_iterations`` where the
        budget ran out.
    depth:
        (H, W) distance travelled when the lane terminated.
    nearest_distance:
        (H, W) smallest distance sample seen by the lane.
    normal:
        (H, W, 3) surface normal for hit lanes, zero elsewhere.

    """

    xp: ArrayModule
    status: Any
    iterations: Any
    depth: Any
    nearest_distance: Any
    normal: Any

    def result_at(self, row: int, col: int) -> RaymarchResult:
        """Return the per-ray result of one lane."""
        status = int(self.status[row, col])
        nearest = float(self.nearest_distance[row, col])
        if status == STATUS_MISSED:
            return MissedScene(iterations=int(self.iterations[row, col]), nearest_distance=nearest)
        if status == STATUS_HIT:
            n = to_numpy(self.xp, self.normal[row, col])
            return HitScene(
                iterations=int(self.iterations[row, col]),
                depth=float(self.depth[row, col]),
                normal=Vec3.from_iterable(n),
            )
        return ReachedMaxIterations(nearest_distance=nearest)

    def to_render_result(self) -> RenderResult:
        """Reduce lanes into depth/proximity/normal grids (NumPy)."""
        xp = self.xp
        hit = self.status == STATUS_HIT
        missed = self.status == STATUS_MISSED

        depth = xp.where(hit, self.depth, xp.where(missed, xp.inf, xp.nan))
        proximity = xp.where(hit, 0.0, self.nearest_distance)
        return RenderResult(
            depth=to_numpy(xp, depth).astype(np.float64),
            proximity=to_numpy(xp, proximity).astype(np.float64),
            normal=to_numpy(xp, self.normal).astype(np.float64),
        )


class ImageMarcher:
    """Vectorised marcher: every pixel of the image is one lane.

    Lanes follow exactly the per-ray rules of :func:`raymarch`; a lane that
    hit or missed stops advancing and keeps its recorded values.
    """

    def __init__(self, xp: ArrayModule, options: RaymarchOptions = DEFAULT_OPTIONS) -> None:
        """Initialise the marcher."""
        self.xp = xp
        self.options = options

    def _normals(self, scene: SDF, p: Any) -> Any:
        """Forward-sample normals for points p shaped (N, 3)."""
        xp = self.xp
        offsets = xp.eye(3, dtype=xp.float64) * float(self.options.normal_epsilon)
        samples = xp.stack([scene.sdf(p + offsets[k]) for k in range(3)], axis=-1)
        return normalize_batch(xp, samples)

    def march(self, ro: Any, rd: Any, scene: SDF) -> ImageMarchResult:
        """March.

        ro: (3,) ray origin shared by every lane
        rd: (H, W, 3) unit directions
        """
        xp = self.xp
        opts = self.options

        ro = xp.asarray(list(ro), dtype=xp.float64)
        rd = xp.asarray(rd, dtype=xp.float64)
        shape = rd.shape[:-1]

        depth = xp.zeros(shape, dtype=xp.float64)
        nearest = xp.full(shape, float(opts.far_clip), dtype=xp.float64)
        status = xp.full(shape, STATUS_MAX_ITERATIONS, dtype=xp.int8)
        iterations = xp.full(shape, int(opts.max_iterations), dtype=xp.int64)
        normal = xp.zeros((*shape, 3), dtype=xp.float64)
        active = xp.ones(shape, dtype=bool)

        for i in range(int(opts.max_iterations)):
            if not bool(xp.any(active)):
                break

            pos = ro + rd * depth[..., None]
            dist = scene.sdf(pos)
            nearest = xp.where(active, xp.minimum(nearest, dist), nearest)

            missed = active & (depth > float(opts.far_clip))
            hit = active & ~missed & (dist < float(opts.epsilon))

            status[missed] = STATUS_MISSED
            status[hit] = STATUS_HIT
            iterations[missed | hit] = i
            if bool(xp.any(hit)):
                normal[hit] = self._normals(scene, pos[hit])

            active = active & ~(missed | hit)
            depth = xp.where(active, depth + dist, depth)

        return ImageMarchResult(
            xp=xp,
            status=status,
            iterations=iterations,
            depth=depth,
            nearest_distance=nearest,
            normal=normal,
        )
