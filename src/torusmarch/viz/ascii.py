"""Terminal output of rendered frames.

Hit pixels are shaded by ``dot(normal, light)`` bucketed into a character
palette; pixels with a non-finite depth (a miss, or ``NaN`` for rays that ran
out of iterations) are left blank.

Rows are printed in grid order, so row 0 (camera ``y = -0.5``) is the top
line and camera ``+y`` points down the terminal.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

import numpy as np

from torusmarch.vector import Vec3

if TYPE_CHECKING:
    import types

    from torusmarch.raymarch.config import RenderResult

_CLEAR_SCREEN = "\033[2J"
_HIDE_CURSOR = "\033[?25l"
_SHOW_CURSOR = "\033[?25h"
_CURSOR_HOME = "\033[H"

DEFAULT_PALETTE = ".,-~:;=!*#$@"
# Faces turned toward a camera looking down +z have normals with negative z.
DEFAULT_LIGHT = Vec3(-1.0, -1.0, -1.0)


class TerminalController:
    """Context manager that clears the screen and hides the cursor for an animation."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def __enter__(self) -> TerminalController:
        self.stream.write(_CLEAR_SCREEN)
        self.stream.write(_HIDE_CURSOR)
        self.stream.flush()
        return self

    def __exit__(
            self,
            exc_type: type[BaseException] | None,
            exc_val: BaseException | None,
            exc_tb: types.TracebackType | None,
    ) -> None:
        self.stream.write(_SHOW_CURSOR)
        self.stream.write(_CLEAR_SCREEN)
        self.stream.flush()


class AsciiRenderer:
    """Map a RenderResult to characters."""

    def __init__(
            self,
            light_direction: Vec3 = DEFAULT_LIGHT,
            palette: str = DEFAULT_PALETTE,
            blank: str = " ",
    ) -> None:
        if len(palette) < 2:  # noqa: PLR2004
            msg = "palette needs at least two characters"
            raise ValueError(msg)
        if len(blank) != 1:
            msg = "blank must be a single character"
            raise ValueError(msg)
        self.light = light_direction.normalize()
        self.palette = palette
        self.blank = blank

    def brightness(self, result: RenderResult) -> np.ndarray:
        """Return (H, W) brightness in [0, 1]; NaN where nothing is drawn."""
        light = self.light.to_numpy()
        lum = np.clip(result.normal @ light, 0.0, 1.0)
        return np.where(result.hit_mask(), lum, np.nan)

    def to_lines(self, result: RenderResult) -> list[str]:
        brightness = self.brightness(result)
        drawn = np.isfinite(brightness)
        index = np.rint(np.where(drawn, brightness, 0.0) * (len(self.palette) - 1)).astype(np.int64)

        chars = np.array(list(self.palette))[index]
        chars = np.where(drawn, chars, self.blank)
        return ["".join(row) for row in chars]

    def to_text(self, result: RenderResult) -> str:
        return "\n".join(self.to_lines(result))

    def draw(self, result: RenderResult, stream: TextIO | None = None) -> None:
        """Home the cursor and overwrite the previous frame."""
        stream = stream if stream is not None else sys.stdout
        stream.write(_CURSOR_HOME)
        stream.write(self.to_text(result))
        stream.write("\n")
        stream.flush()
