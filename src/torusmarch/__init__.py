from torusmarch.camera.camera3d import Camera3D
from torusmarch.geometry import TorusSDF, torus
from torusmarch.raymarch.config import (
    HitScene,
    MissedScene,
    Ray,
    RaymarchOptions,
    RaymarchResult,
    ReachedMaxIterations,
    RenderResult,
)
from torusmarch.raymarch.marcher import ImageMarcher, raymarch
from torusmarch.scene import AnimatedScene, default_scene
from torusmarch.vector import Mat3, Vec2, Vec3

__all__ = [
    "AnimatedScene",
    "Camera3D",
    "HitScene",
    "ImageMarcher",
    "Mat3",
    "MissedScene",
    "Ray",
    "RaymarchOptions",
    "RaymarchResult",
    "ReachedMaxIterations",
    "RenderResult",
    "TorusSDF",
    "Vec2",
    "Vec3",
    "default_scene",
    "raymarch",
    "torus",
]
