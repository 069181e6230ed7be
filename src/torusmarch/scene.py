from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from torusmarch.geometry import TorusSDF
from torusmarch.math_utils import matvec_batch
from torusmarch.protocols import Scene
from torusmarch.vector import Mat3, Vec3


@dataclass(frozen=True, slots=True)
class AnimatedScene(Scene):
    """A primitive spinning about ``pivot`` at ``spin`` rad/s per axis.

    The scene is immutable; ``at(t)`` gives the scene at another time, so one
    instance can be shared by every pixel of a frame.
    """

    primitive: Scene
    pivot: Vec3
    spin: Vec3
    time: float = 0.0
    _inverse: Mat3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        angles = self.spin * self.time
        rotation = Mat3.from_euler(angles.x, angles.y, angles.z)
        object.__setattr__(self, "_inverse", rotation.transpose())

    def at(self, time: float) -> AnimatedScene:
        return replace(self, time=time)

    def rotation(self) -> Mat3:
        return self._inverse.transpose()

    def __call__(self, p: Vec3) -> float:
        return self.primitive(self.pivot + self._inverse @ (p - self.pivot))

    def sdf(self, p: Any) -> Any:
        xp = getattr(self.primitive, "xp", None)
        if xp is None:
            msg = "primitive does not expose an array module"
            raise TypeError(msg)
        pivot = xp.asarray(list(self.pivot), dtype=xp.float64)
        inverse = xp.asarray(self._inverse.to_numpy())
        return self.primitive.sdf(pivot + matvec_batch(xp, inverse, p - pivot))


DEFAULT_CENTER = Vec3(0.0, 0.0, 10.0)
DEFAULT_NORMAL = Vec3(0.0, 1.0, 0.0)
DEFAULT_MAJOR_RADIUS = 3.0
DEFAULT_MINOR_RADIUS = 1.0
DEFAULT_SPIN = Vec3(1.0, 0.5, 0.0)


def default_scene(xp: Any = None) -> AnimatedScene:
    """Torus at (0, 0, 10) tumbling about its centre."""
    kwargs = {} if xp is None else {"xp": xp}
    torus = TorusSDF(
        origin=DEFAULT_CENTER,
        normal=DEFAULT_NORMAL,
        major_radius=DEFAULT_MAJOR_RADIUS,
        minor_radius=DEFAULT_MINOR_RADIUS,
        **kwargs,
    )
    return AnimatedScene(primitive=torus, pivot=DEFAULT_CENTER, spin=DEFAULT_SPIN)
