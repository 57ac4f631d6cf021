"""Exceptions raised by the Mandelbrot explorer core."""


class ExplorerError(Exception):
    """Base class for explorer errors."""


class InvalidViewport(ExplorerError, ValueError):
    """Raised when a viewport update would make the plane mapping degenerate."""


class OutOfBoundsPixel(ExplorerError, IndexError):
    """Raised when a pixel outside the surface is mapped to the plane."""


class DegenerateGesture(ExplorerError, ValueError):
    """Raised when a gesture does not carry enough information to act on."""
