"""Complex-plane values, the interactive viewport and the pixel mapping."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass

import numpy as np

from .errors import DegenerateGesture, InvalidViewport, OutOfBoundsPixel

DEFAULT_ZOOM = 0.5


@dataclass(frozen=True)
class ComplexPoint:
    """A point on the complex plane. Arithmetic returns new points."""

    real: float
    imaginary: float

    def square(self) -> ComplexPoint:
        real = self.real * self.real - self.imaginary * self.imaginary
        imaginary = 2 * self.real * self.imaginary
        return ComplexPoint(real, imaginary)

    def add(self, other: ComplexPoint) -> ComplexPoint:
        return ComplexPoint(self.real + other.real, self.imaginary + other.imaginary)

    def modulus(self) -> float:
        return math.sqrt(self.real * self.real + self.imaginary * self.imaginary)


def _validated(zoom: float, offset_x: float, offset_y: float) -> tuple[float, float, float]:
    zoom = float(zoom)
    offset_x = float(offset_x)
    offset_y = float(offset_y)
    if not math.isfinite(zoom) or zoom < sys.float_info.min:
        raise InvalidViewport(f"zoom must be finite and strictly positive, got {zoom!r}")
    if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
        raise InvalidViewport(f"offset must be finite, got ({offset_x!r}, {offset_y!r})")
    return zoom, offset_x, offset_y


@dataclass
class ViewportState:
    """Zoom and pan of the visible window onto the complex plane.

    Mutate through :meth:`update`, :meth:`set_zoom` or :meth:`set_offset`; a
    rejected update raises :class:`InvalidViewport` and keeps the old values.
    """

    zoom: float = DEFAULT_ZOOM
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self) -> None:
        self.zoom, self.offset_x, self.offset_y = _validated(self.zoom, self.offset_x, self.offset_y)

    def update(self, zoom: float, offset_x: float, offset_y: float) -> None:
        self.zoom, self.offset_x, self.offset_y = _validated(zoom, offset_x, offset_y)

    def set_zoom(self, zoom: float) -> None:
        self.update(zoom, self.offset_x, self.offset_y)

    def set_offset(self, offset_x: float, offset_y: float) -> None:
        self.update(self.zoom, offset_x, offset_y)

    def snapshot(self) -> tuple[float, float, float]:
        return self.zoom, self.offset_x, self.offset_y


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"surface size must be positive, got {width}x{height}")


def plane_coordinate(x: float, y: float, viewport: ViewportState, width: int, height: int) -> ComplexPoint:
    """Map a (possibly fractional) screen position to the plane without bounds checks."""

    scale_x = 0.5 * viewport.zoom * width
    scale_y = 0.5 * viewport.zoom * height
    real = (x - width / 2) / scale_x + viewport.offset_x
    imaginary = (y - height / 2) / scale_y + viewport.offset_y
    return ComplexPoint(real, imaginary)


def map_pixel_to_plane(pixel_x: int, pixel_y: int, viewport: ViewportState, width: int, height: int) -> ComplexPoint:
    """Return the plane point sampled by pixel ``(pixel_x, pixel_y)``."""

    _check_size(width, height)
    if not (0 <= pixel_x < width and 0 <= pixel_y < height):
        raise OutOfBoundsPixel(f"pixel ({pixel_x}, {pixel_y}) outside {width}x{height} surface")
    return plane_coordinate(pixel_x, pixel_y, viewport, width, height)


def plane_grid(viewport: ViewportState, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Map every pixel at once. Returns ``(reals, imaginaries)`` of shape ``(height, width)``."""

    _check_size(width, height)
    scale_x = np.float64(0.5 * viewport.zoom * width)
    scale_y = np.float64(0.5 * viewport.zoom * height)
    xs = (np.arange(width, dtype=np.float64) - np.float64(width / 2)) / scale_x + np.float64(viewport.offset_x)
    ys = (np.arange(height, dtype=np.float64) - np.float64(height / 2)) / scale_y + np.float64(viewport.offset_y)
    reals, imaginaries = np.meshgrid(xs, ys)
    return reals, imaginaries


def zoom_at(viewport: ViewportState, cursor_x: float, cursor_y: float, factor: float, width: int, height: int) -> None:
    """Scale the zoom by ``factor`` keeping the plane point under the cursor fixed."""

    if width <= 0 or height <= 0:
        raise DegenerateGesture(f"cannot zoom on an empty {width}x{height} surface")
    new_zoom = viewport.zoom * factor
    if not math.isfinite(new_zoom) or new_zoom < sys.float_info.min:
        raise InvalidViewport(f"zoom factor {factor!r} would make zoom {new_zoom!r}")
    anchor = plane_coordinate(cursor_x, cursor_y, viewport, width, height)
    offset_x = anchor.real - (cursor_x - width / 2) / (0.5 * new_zoom * width)
    offset_y = anchor.imaginary - (cursor_y - height / 2) / (0.5 * new_zoom * height)
    viewport.update(new_zoom, offset_x, offset_y)


def pan_by(viewport: ViewportState, movement_x: float, movement_y: float) -> None:
    """Move the offset against a pointer movement, scaled by the inverse zoom."""

    viewport.set_offset(
        viewport.offset_x - movement_x / viewport.zoom,
        viewport.offset_y - movement_y / viewport.zoom,
    )
