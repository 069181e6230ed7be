from __future__ import annotations

import numpy as np

from torusmarch.backend import BackendName, get_array_module
from torusmarch.camera.camera3d import Camera3D
from torusmarch.geometry import TorusSDF
from torusmarch.raymarch.config import RaymarchOptions
from torusmarch.scene import AnimatedScene
from torusmarch.vector import Vec3
from torusmarch.viz.ascii import AsciiRenderer
from torusmarch.viz.plot import RenderPlotter

# ============================================================
# TOP-LEVEL PARAMETERS (extract everything tweakable here)
# ============================================================

# Run
BACKEND: BackendName = "auto"

# Scene: torus
TORUS_CENTER = [0.0, 0.0, 10.0]
TORUS_NORMAL = [0.0, 1.0, 0.0]
TORUS_MAJOR_RADIUS = 3.0
TORUS_MINOR_RADIUS = 1.0

# Scene: spin (rad/s about x, y, z)
SPIN = [1.0, 0.5, 0.0]

# Camera
CAMERA_POS = [0.0, 0.0, 0.0]
CAMERA_LOOK_AT = [0.0, 0.0, 10.0]
WIDTH, HEIGHT = 160, 80

# Marching
MAX_ITERATIONS = 100
FAR_CLIP = 1e3

# Animation
FRAMES_N = 24
FPS = 12.0


def main() -> None:
    xp = get_array_module(BACKEND)

    torus = TorusSDF(
        origin=Vec3(*TORUS_CENTER),
        normal=Vec3(*TORUS_NORMAL).normalize(),
        major_radius=TORUS_MAJOR_RADIUS,
        minor_radius=TORUS_MINOR_RADIUS,
        xp=xp,
    )
    scene = AnimatedScene(primitive=torus, pivot=torus.origin, spin=Vec3(*SPIN))

    camera = Camera3D.look_at(Vec3(*CAMERA_POS), Vec3(*CAMERA_LOOK_AT), width=WIDTH, height=HEIGHT)
    options = RaymarchOptions(max_iterations=MAX_ITERATIONS, far_clip=FAR_CLIP)

    frames = [camera.render_batch(scene.at(i / FPS), options, xp) for i in range(FRAMES_N)]

    hits = [int(np.count_nonzero(f.hit_mask())) for f in frames]
    print(f"rendered {len(frames)} frames, hit pixels per frame: min={min(hits)} max={max(hits)}")
    print(AsciiRenderer().to_text(frames[0]))

    plotter = RenderPlotter()
    ani = plotter.animate(frames, interval_ms=int(1000.0 / FPS))
    _ = ani  # keep reference
    plotter.show()


if __name__ == "__main__":
    main()
