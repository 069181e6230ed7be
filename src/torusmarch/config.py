from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from torusmarch.backend import BACKEND_NAMES, BackendName
from torusmarch.viz.ascii import DEFAULT_LIGHT, DEFAULT_PALETTE
from torusmarch.vector import Vec3

if TYPE_CHECKING:
    import argparse

DEFAULT_WIDTH = 60
DEFAULT_HEIGHT = 30
DEFAULT_FPS = 30.0
DEFAULT_PLOT_FRAMES = 48
DEFAULT_BACKEND: str = os.environ.get("TORUSMARCH_BACKEND", "auto").strip() or "auto"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Everything tweakable about a run."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fps: float = DEFAULT_FPS
    frames: int | None = None
    backend: BackendName = DEFAULT_BACKEND  # type: ignore[assignment]
    batch: bool = True
    plot: bool = False
    realtime: bool = True
    log_level: str = "WARNING"
    palette: str = DEFAULT_PALETTE
    camera_origin: Vec3 = field(default_factory=Vec3.zero)
    light_direction: Vec3 = DEFAULT_LIGHT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"grid size must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        if not self.fps > 0.0:
            msg = f"fps must be positive, got {self.fps}"
            raise ValueError(msg)
        if self.frames is not None and self.frames < 0:
            msg = f"frames must not be negative, got {self.frames}"
            raise ValueError(msg)
        if self.plot and self.frames == 0:
            msg = "plot mode needs at least one frame"
            raise ValueError(msg)
        if self.backend not in BACKEND_NAMES:
            msg = f"unknown backend {self.backend!r}, expected one of {BACKEND_NAMES}"
            raise ValueError(msg)
        if self.log_level.upper() not in LOG_LEVELS:
            msg = f"unknown log level {self.log_level!r}"
            raise ValueError(msg)

    @classmethod
    def from_args(cls, ns: argparse.Namespace) -> AppConfig:
        return cls(
            width=ns.width,
            height=ns.height,
            fps=ns.fps,
            frames=ns.frames,
            backend=ns.backend,
            batch=ns.batch,
            plot=ns.plot,
            log_level=ns.log_level,
            palette=ns.palette,
        )
