"""Matplotlib viewer of depth, proximity and normal grids.

Images use ``origin="upper"``: grid row 0 (camera ``y = -0.5``)
is drawn at the top, matching the row order of the ASCII renderer.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import matplotlib as mpl
import numpy as np
from matplotlib.animation import FuncAnimation

# IMPORTANT: set backend before importing pyplot
_BACKEND = os.environ.get("TORUSMARCH_MPL_BACKEND", "").strip()
if _BACKEND:
    mpl.use(_BACKEND, force=True)
else:
    for candidate in ("TkAgg", "QtAgg", "Agg"):
        # noinspection PyBroadException
        try:
            mpl.use(candidate, force=True)
            break
        except Exception:  # pragma: no cover  # noqa: BLE001, S112
            continue

import matplotlib.pyplot as plt  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Sequence

    from torusmarch.raymarch.config import RenderResult


def depth_image(result: RenderResult) -> np.ndarray:
    """Depth with non-renderable pixels masked out (NaN) for imshow."""
    return np.where(result.hit_mask(), result.depth, np.nan)


def normal_image(result: RenderResult) -> np.ndarray:
    """Map normals from [-1, 1] to RGB in [0, 1]; background is black."""
    rgb = 0.5 * (result.normal + 1.0)
    return np.where(result.hit_mask()[..., None], rgb, 0.0)


def proximity_image(result: RenderResult) -> np.ndarray:
    """Nearest distance of non-hit rays, NaN for hits."""
    return np.where(result.hit_mask(), np.nan, result.proximity)


class RenderPlotter:
    """Depth / proximity / normal panels of rendered frames."""

    def __init__(self) -> None:
        """Initialize the plot."""
        self.fig, (self.ax_depth, self.ax_prox, self.ax_normal) = plt.subplots(1, 3, figsize=(15, 4))

        for ax, title in (
                (self.ax_depth, "Depth"),
                (self.ax_prox, "Proximity (non-hits)"),
                (self.ax_normal, "Normal"),
        ):
            ax.axis("off")
            ax.set_title(title)

        # Artists (initialized in draw/animate)
        self.im_depth: Any = None
        self.im_prox: Any = None
        self.im_normal: Any = None

    def draw(self, result: RenderResult) -> None:
        self.im_depth = self.ax_depth.imshow(depth_image(result), origin="upper", cmap="viridis_r")
        self.im_prox = self.ax_prox.imshow(proximity_image(result), origin="upper", cmap="magma")
        self.im_normal = self.ax_normal.imshow(normal_image(result), origin="upper")

    def animate(
            self,
            frames: Sequence[RenderResult],
            interval_ms: int = 40,
    ) -> FuncAnimation:
        if not frames:
            msg = "frames is empty"
            raise ValueError(msg)

        self.draw(frames[0])

        def _update(i: int) -> list[Any]:
            f = frames[i]
            self.im_depth.set_data(depth_image(f))
            self.im_prox.set_data(proximity_image(f))
            self.im_normal.set_data(normal_image(f))
            return [self.im_depth, self.im_prox, self.im_normal]

        return FuncAnimation(
            self.fig,
            _update,
            frames=len(frames),
            interval=interval_ms,
            repeat=True,
            blit=False,
        )

    @staticmethod
    def show() -> None:
        plt.tight_layout()
        plt.show()
