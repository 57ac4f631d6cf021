"""Coloring policies turning escape counts into RGB pixels."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
import PIL.ImageColor
from matplotlib import colormaps

from .escape import IterationResult

RGB = tuple[int, int, int]


def parse_color(value: str) -> RGB:
    """Parse any color string Pillow understands (``#rrggbb``, names, ``hsl(...)``)."""

    rgb = PIL.ImageColor.getrgb(value)
    return int(rgb[0]), int(rgb[1]), int(rgb[2])


class ColoringPolicy(ABC):
    """Base policy. Subclasses implement :meth:`colors` for a grid of counts."""

    name = "base"

    @abstractmethod
    def colors(self, iterations: np.ndarray, max_iterations: int) -> np.ndarray:
        ...

    def color(self, result: IterationResult, max_iterations: int) -> RGB:
        grid = self.colors(np.array([[result.iterations]], dtype=np.int32), max_iterations)
        return tuple(int(channel) for channel in grid[0, 0])


class FlatHueColoring(ColoringPolicy):
    """Paint in-set points one fixed hue and leave escaped points at the background.

    The hue depends only on the iteration bound, so the set renders as a flat
    silhouette.
    """

    name = "flat"

    def __init__(self, background: RGB = (0, 0, 0)) -> None:
        self.background = tuple(background)

    @staticmethod
    def hue(max_iterations: int) -> float:
        return 360 * (1 - max_iterations / (max_iterations + 1))

    def set_color(self, max_iterations: int) -> RGB:
        return parse_color(f"hsl({self.hue(max_iterations):.6f}, 100%, 50%)")

    def colors(self, iterations: np.ndarray, max_iterations: int) -> np.ndarray:
        iterations = np.asarray(iterations)
        out = np.empty(iterations.shape + (3,), dtype=np.uint8)
        out[...] = self.background
        out[iterations >= max_iterations] = self.set_color(max_iterations)
        return out


class SmoothColoring(ColoringPolicy):
    """Shade escaped points by escape count through a matplotlib colormap."""

    name = "smooth"

    def __init__(self, colormap: str = "twilight_shifted", inside: RGB = (0, 0, 0)) -> None:
        try:
            self.cmap = colormaps[colormap]
        except KeyError as exc:
            raise ValueError(f"unknown colormap {colormap!r}") from exc
        self.inside = tuple(inside)

    def colors(self, iterations: np.ndarray, max_iterations: int) -> np.ndarray:
        iterations = np.asarray(iterations)
        inside = iterations >= max_iterations
        v = iterations.astype(np.float64) / max(max_iterations, 1)
        rgba = np.array(self.cmap(np.clip(v, 0.0, 1.0)), copy=True)
        out = np.uint8(np.clip(rgba[..., :3] * 255, 0, 255))
        out[inside] = self.inside
        return out


COLORINGS = {
    FlatHueColoring.name: FlatHueColoring,
    SmoothColoring.name: SmoothColoring,
}
