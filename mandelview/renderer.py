"""Full-surface rendering of the Mandelbrot set."""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from .coloring import RGB, ColoringPolicy, FlatHueColoring
from .escape import classify_grid
from .plane import ViewportState, plane_grid


class RasterSurface(Protocol):
    """A fixed-size pixel grid the renderer writes into."""

    width: int
    height: int

    def set_pixel(self, x: int, y: int, color: RGB) -> None:
        ...


class ArraySurface:
    """RasterSurface backed by a ``(height, width, 3)`` uint8 array."""

    def __init__(self, width: int, height: int, background: RGB = (0, 0, 0)) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"surface size must not be negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = tuple(background)
        self._pixels = np.empty((self.height, self.width, 3), dtype=np.uint8)
        self.clear()

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def clear(self) -> None:
        self._pixels[...] = self.background

    def set_pixel(self, x: int, y: int, color: RGB) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} surface")
        self._pixels[y, x] = color

    def blit(self, colors: np.ndarray) -> None:
        """Overwrite every pixel from a ``(height, width, 3)`` array."""

        if colors.shape != self._pixels.shape:
            raise ValueError(f"expected colors of shape {self._pixels.shape}, got {colors.shape}")
        self._pixels[...] = colors


def render(
    viewport: ViewportState,
    surface: RasterSurface,
    width: int,
    height: int,
    max_iterations: int,
    coloring: Optional[ColoringPolicy] = None,
    *,
    device: Optional[str] = None,
) -> None:
    """Map, classify and color every pixel of ``surface``.

    Rendering a surface with no pixels, or with a zero iteration bound, does
    nothing.
    """

    if width < 0 or height < 0 or max_iterations < 0:
        raise ValueError(f"invalid render size {width}x{height} with {max_iterations} iterations")
    if width == 0 or height == 0 or max_iterations == 0:
        return
    if coloring is None:
        coloring = FlatHueColoring(background=getattr(surface, "background", (0, 0, 0)))

    reals, imaginaries = plane_grid(viewport, width, height)
    iterations = classify_grid(reals, imaginaries, max_iterations, device=device)
    colors = coloring.colors(iterations, max_iterations)

    blit = getattr(surface, "blit", None)
    if blit is not None:
        blit(colors)
        return
    for y in range(height):
        for x in range(width):
            r, g, b = colors[y, x]
            surface.set_pixel(x, y, (int(r), int(g), int(b)))
