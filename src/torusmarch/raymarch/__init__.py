from torusmarch.raymarch.config import (
    HitScene,
    MissedScene,
    Ray,
    RaymarchOptions,
    RaymarchResult,
    ReachedMaxIterations,
    RenderResult,
)
from torusmarch.raymarch.marcher import ImageMarcher, ImageMarchResult, raymarch

__all__ = [
    "HitScene",
    "ImageMarchResult",
    "ImageMarcher",
    "MissedScene",
    "Ray",
    "RaymarchOptions",
    "RaymarchResult",
    "ReachedMaxIterations",
    "RenderResult",
    "raymarch",
]
