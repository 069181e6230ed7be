from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable, TextIO

import numpy as np

from torusmarch.raymarch.marcher import DEFAULT_OPTIONS

if TYPE_CHECKING:
    from torusmarch.backend import ArrayModule
    from torusmarch.camera.camera3d import Camera3D
    from torusmarch.raymarch.config import RaymarchOptions, RenderResult
    from torusmarch.scene import AnimatedScene
    from torusmarch.viz.ascii import AsciiRenderer

logger = logging.getLogger(__name__)


class FrameLoop:
    """Render the animated scene frame after frame at a fixed rate.

    With ``realtime`` the scene time is wall-clock time since start, otherwise
    frame ``k`` is rendered at ``k / fps`` regardless of how long rendering
    takes. ``frames=None`` runs until interrupted.
    """

    def __init__(
            self,
            camera: Camera3D,
            scene: AnimatedScene,
            renderer: AsciiRenderer,
            options: RaymarchOptions = DEFAULT_OPTIONS,
            fps: float = 30.0,
            frames: int | None = None,
            *,
            batch: bool = True,
            xp: ArrayModule = np,
            realtime: bool = True,
            clock: Callable[[], float] = time.perf_counter,
            sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        """Initialise the loop."""
        self.camera = camera
        self.scene = scene
        self.renderer = renderer
        self.options = options
        self.period = 1.0 / fps
        self.frames = frames
        self.batch = batch
        self.xp = xp
        self.realtime = realtime
        self.clock = clock
        self.sleep = sleep

    def render_frame(self, t: float) -> RenderResult:
        scene = self.scene.at(t)
        if self.batch:
            return self.camera.render_batch(scene, self.options, self.xp)
        return self.camera.render(scene, self.options)

    def run(self, stream: TextIO | None = None) -> int:
        """Draw frames to ``stream``; return how many were drawn."""
        count = 0
        start = self.clock()

        try:
            while self.frames is None or count < self.frames:
                frame_start = self.clock()
                t = frame_start - start if self.realtime else count * self.period

                result = self.render_frame(t)
                self.renderer.draw(result, stream)
                count += 1

                elapsed = self.clock() - frame_start
                remaining = self.period - elapsed
                if remaining > 0.0:
                    self.sleep(remaining)
                else:
                    logger.debug("frame %d overran its budget by %.1f ms", count, -remaining * 1e3)
        except KeyboardInterrupt:
            logger.info("interrupted after %d frames", count)

        logger.debug("drew %d frames in %.2f s", count, self.clock() - start)
        return count
