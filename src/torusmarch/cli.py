from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from torusmarch.backend import BACKEND_NAMES, get_array_module
from torusmarch.camera.camera3d import Camera3D
from torusmarch.config import (
    DEFAULT_BACKEND,
    DEFAULT_FPS,
    DEFAULT_HEIGHT,
    DEFAULT_PLOT_FRAMES,
    DEFAULT_WIDTH,
    LOG_LEVELS,
    AppConfig,
)
from torusmarch.loop import FrameLoop
from torusmarch.scene import default_scene
from torusmarch.viz.ascii import DEFAULT_PALETTE, AsciiRenderer, TerminalController

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torusmarch",
        description="Raymarch a spinning torus and stream it to the terminal as ASCII art.",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="columns (default: %(default)s)")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="rows (default: %(default)s)")
    parser.add_argument("--fps", type=float, default=DEFAULT_FPS, help="target frame rate (default: %(default)s)")
    parser.add_argument("--frames", type=int, default=None, help="stop after this many frames (default: run forever)")
    parser.add_argument(
        "--backend",
        choices=BACKEND_NAMES,
        default=DEFAULT_BACKEND,
        help="array module for the batch marcher (default: %(default)s)",
    )
    parser.add_argument(
        "--batch",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="march all pixels at once instead of one ray at a time",
    )
    parser.add_argument("--plot", action="store_true", help="show depth/proximity/normal panels with matplotlib")
    parser.add_argument("--palette", default=DEFAULT_PALETTE, help="characters from dark to bright")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS)
    return parser


def run_terminal(cfg: AppConfig) -> int:
    xp = get_array_module(cfg.backend)
    camera = Camera3D(width=cfg.width, height=cfg.height, origin=cfg.camera_origin)
    renderer = AsciiRenderer(light_direction=cfg.light_direction, palette=cfg.palette)
    loop = FrameLoop(
        camera=camera,
        scene=default_scene(xp),
        renderer=renderer,
        fps=cfg.fps,
        frames=cfg.frames,
        batch=cfg.batch,
        xp=xp,
        realtime=cfg.realtime,
    )

    with TerminalController(sys.stdout):
        return loop.run(sys.stdout)


def run_plot(cfg: AppConfig) -> int:
    from torusmarch.viz.plot import RenderPlotter  # noqa: PLC0415

    xp = get_array_module(cfg.backend)
    camera = Camera3D(width=cfg.width, height=cfg.height, origin=cfg.camera_origin)
    scene = default_scene(xp)

    n = cfg.frames if cfg.frames is not None else DEFAULT_PLOT_FRAMES
    frames = []
    for k in range(n):
        frame_scene = scene.at(k / cfg.fps)
        if cfg.batch:
            frames.append(camera.render_batch(frame_scene, xp=xp))
        else:
            frames.append(camera.render(frame_scene))
    logger.info("rendered %d frames for plotting", len(frames))

    plotter = RenderPlotter()
    ani = plotter.animate(frames, interval_ms=int(1000.0 / cfg.fps))  # noqa: F841
    plotter.show()
    return len(frames)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)

    try:
        cfg = AppConfig.from_args(ns)
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=cfg.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if cfg.plot:
            run_plot(cfg)
        else:
            run_terminal(cfg)
    except RuntimeError as exc:
        logger.error("%s", exc)  # noqa: TRY400
        return 1
    return 0
