"""Public API for the interactive Mandelbrot explorer."""

from .coloring import ColoringPolicy, FlatHueColoring, SmoothColoring, parse_color
from .controller import InputController, RenderScheduler, TouchTracker
from .errors import DegenerateGesture, ExplorerError, InvalidViewport, OutOfBoundsPixel
from .escape import IterationResult, classify, classify_grid
from .plane import (
    ComplexPoint,
    ViewportState,
    map_pixel_to_plane,
    pan_by,
    plane_coordinate,
    plane_grid,
    zoom_at,
)
from .renderer import ArraySurface, RasterSurface, render
from .session import ExplorerConfig, ExplorerSession

__all__ = [
    "ArraySurface",
    "ColoringPolicy",
    "ComplexPoint",
    "DegenerateGesture",
    "ExplorerConfig",
    "ExplorerError",
    "ExplorerSession",
    "FlatHueColoring",
    "InputController",
    "InvalidViewport",
    "IterationResult",
    "OutOfBoundsPixel",
    "RasterSurface",
    "RenderScheduler",
    "SmoothColoring",
    "TouchTracker",
    "ViewportState",
    "classify",
    "classify_grid",
    "map_pixel_to_plane",
    "pan_by",
    "parse_color",
    "plane_coordinate",
    "plane_grid",
    "render",
    "zoom_at",
]
