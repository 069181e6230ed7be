from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from torusmarch.vector import Vec3

SceneFn = Callable[["Vec3"], float]
"""Scalar distance field: a point in, a signed distance out."""


class SDF(Protocol):
    """Batched signed distance field contract."""

    def sdf(self, p: Any) -> Any:
        """Signed distance to surface for points p shaped (..., 3)."""
        ...


class Scene(SDF, Protocol):
    """A distance field usable by both the scalar and the image marcher."""

    def __call__(self, p: Vec3) -> float:
        ...
