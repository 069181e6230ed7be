from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from torusmarch.vector import Vec3


@dataclass(frozen=True, slots=True)
class Ray:
    """Half-line ``origin + direction * t``; direction is expected to be unit length."""

    origin: Vec3
    direction: Vec3

    def at(self, t: float) -> Vec3:
        return self.origin + self.direction * t


@dataclass(frozen=True, slots=True)
class RaymarchOptions:
    """Marching parameters shared read-only by every pixel of a frame.

    Attributes
    ----------
    max_iterations:
        Iteration budget per ray.
    far_clip:
        Travel distance past which a ray counts as a miss.
    epsilon:
        A distance sample strictly below this is a hit.
    normal_epsilon:
        Per-axis offset used to sample the field for the surface normal.

    """

    max_iterations: int = 100
    far_clip: float = 1e3
    epsilon: float = 1e-4
    normal_epsilon: float = 1e-3

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            msg = f"max_iterations must be positive, got {self.max_iterations}"
            raise ValueError(msg)
        for name in ("far_clip", "epsilon", "normal_epsilon"):
            value = getattr(self, name)
            if not value > 0.0:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class MissedScene:
    """The ray travelled past ``far_clip`` without converging."""

    iterations: int
    nearest_distance: float


@dataclass(frozen=True, slots=True)
class ReachedMaxIterations:
    """The iteration budget ran out before a hit or a miss was established."""

    nearest_distance: float


@dataclass(frozen=True, slots=True)
class HitScene:
    """The distance sample dropped below ``epsilon`` at ``depth``."""

    iterations: int
    depth: float
    normal: Vec3


RaymarchResult = Union[MissedScene, ReachedMaxIterations, HitScene]


@dataclass(slots=True)
class RenderResult:
    """Per-pixel output grids of one frame, indexed ``[row][col]``.

    ``depth`` is the hit distance for hits, ``+inf`` for confirmed misses and
    ``NaN`` where marching ran out of iterations, so ``isfinite(depth)`` is
    the renderability test. ``proximity`` holds the nearest distance sampled
    by non-hit rays and stays 0 for hits. ``normal`` is the zero vector
    except for hits.
    """

    depth: np.ndarray
    proximity: np.ndarray
    normal: np.ndarray

    @classmethod
    def empty(cls, width: int, height: int) -> RenderResult:
        return cls(
            depth=np.zeros((height, width), dtype=np.float64),
            proximity=np.zeros((height, width), dtype=np.float64),
            normal=np.zeros((height, width, 3), dtype=np.float64),
        )

    @property
    def width(self) -> int:
        return int(self.depth.shape[1])

    @property
    def height(self) -> int:
        return int(self.depth.shape[0])

    def hit_mask(self) -> np.ndarray:
        return np.isfinite(self.depth)
