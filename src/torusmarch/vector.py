from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

import numpy as np

from torusmarch.math_utils import NORMALIZE_EPS

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D vector."""

    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> Vec2:
        return Vec2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vec2:
        n = self.length()
        if n <= NORMALIZE_EPS:
            return self
        return Vec2(self.x / n, self.y / n)


@dataclass(frozen=True, slots=True)
class Vec3:
    """Immutable 3D vector.

    Supports ``+``, ``-``, scalar ``*`` and unary ``-``. ``normalize`` leaves
    a (near-)zero vector untouched instead of dividing by zero.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vec3:
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> Vec3:
        return Vec3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vec3:
        n = self.length()
        if n <= NORMALIZE_EPS:
            return self
        return Vec3(self.x / n, self.y / n, self.z / n)

    def project_onto(self, axis: Vec3) -> Vec3:
        """Component of this vector along a unit ``axis``."""
        return axis * self.dot(axis)

    @property
    def xy(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def xz(self) -> Vec2:
        return Vec2(self.x, self.z)

    @property
    def yz(self) -> Vec2:
        return Vec2(self.y, self.z)

    def to_numpy(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


AXIS_X = Vec3(1.0, 0.0, 0.0)
AXIS_Y = Vec3(0.0, 1.0, 0.0)
AXIS_Z = Vec3(0.0, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Mat3:
    """Row-major 3x3 matrix, used for camera orientation and scene rotation."""

    rows: tuple[Vec3, Vec3, Vec3]

    @classmethod
    def identity(cls) -> Mat3:
        return cls((AXIS_X, AXIS_Y, AXIS_Z))

    @classmethod
    def from_columns(cls, c0: Vec3, c1: Vec3, c2: Vec3) -> Mat3:
        return cls(
            (
                Vec3(c0.x, c1.x, c2.x),
                Vec3(c0.y, c1.y, c2.y),
                Vec3(c0.z, c1.z, c2.z),
            ),
        )

    @classmethod
    def rotation_x(cls, angle: float) -> Mat3:
        c, s = math.cos(angle), math.sin(angle)
        return cls((Vec3(1.0, 0.0, 0.0), Vec3(0.0, c, -s), Vec3(0.0, s, c)))

    @classmethod
    def rotation_y(cls, angle: float) -> Mat3:
        c, s = math.cos(angle), math.sin(angle)
        return cls((Vec3(c, 0.0, s), Vec3(0.0, 1.0, 0.0), Vec3(-s, 0.0, c)))

    @classmethod
    def rotation_z(cls, angle: float) -> Mat3:
        c, s = math.cos(angle), math.sin(angle)
        return cls((Vec3(c, -s, 0.0), Vec3(s, c, 0.0), Vec3(0.0, 0.0, 1.0)))

    @classmethod
    def from_euler(cls, x: float, y: float, z: float) -> Mat3:
        """Rotation about x, then y, then z (extrinsic)."""
        return cls.rotation_z(z) @ cls.rotation_y(y) @ cls.rotation_x(x)

    @overload
    def __matmul__(self, other: Vec3) -> Vec3: ...

    @overload
    def __matmul__(self, other: Mat3) -> Mat3: ...

    def __matmul__(self, other: Vec3 | Mat3) -> Vec3 | Mat3:
        r0, r1, r2 = self.rows
        if isinstance(other, Vec3):
            return Vec3(r0.dot(other), r1.dot(other), r2.dot(other))
        c0, c1, c2 = other.columns()
        return Mat3(
            (
                Vec3(r0.dot(c0), r0.dot(c1), r0.dot(c2)),
                Vec3(r1.dot(c0), r1.dot(c1), r1.dot(c2)),
                Vec3(r2.dot(c0), r2.dot(c1), r2.dot(c2)),
            ),
        )

    def columns(self) -> tuple[Vec3, Vec3, Vec3]:
        return self.transpose().rows

    def transpose(self) -> Mat3:
        r0, r1, r2 = self.rows
        return Mat3(
            (
                Vec3(r0.x, r1.x, r2.x),
                Vec3(r0.y, r1.y, r2.y),
                Vec3(r0.z, r1.z, r2.z),
            ),
        )

    def to_numpy(self) -> np.ndarray:
        return np.array([list(r) for r in self.rows], dtype=np.float64)
