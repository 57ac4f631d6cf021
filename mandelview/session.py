"""Interactive explorer session tying viewport, renderer and input together."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .coloring import FlatHueColoring, SmoothColoring, ColoringPolicy, parse_color
from .controller import InputController, RenderScheduler, TouchTracker
from .plane import DEFAULT_ZOOM, ViewportState
from .renderer import ArraySurface, render


@dataclass(frozen=True)
class ExplorerConfig:
    """Settings fixed for the lifetime of an explorer session."""

    width: int = 800
    height: int = 800
    max_iterations: int = 100
    zoom: float = DEFAULT_ZOOM
    offset_x: float = 0.0
    offset_y: float = 0.0
    coloring: str = "flat"
    colormap: str = "twilight_shifted"
    inside_color: str = "#000000"
    background: str = "#000000"
    coalesce: bool = False
    device: str = "/CPU:0"


def build_coloring(config: ExplorerConfig) -> ColoringPolicy:
    if config.coloring == FlatHueColoring.name:
        return FlatHueColoring(background=parse_color(config.background))
    if config.coloring == SmoothColoring.name:
        return SmoothColoring(config.colormap, inside=parse_color(config.inside_color))
    raise ValueError(f"unknown coloring {config.coloring!r}")


class ExplorerSession:
    """One interactive session: a viewport, a surface and the gesture plumbing."""

    def __init__(
        self,
        config: ExplorerConfig,
        *,
        arm: Optional[Callable[[], None]] = None,
        on_rendered: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.config = config
        self.viewport = ViewportState(config.zoom, config.offset_x, config.offset_y)
        self.coloring = build_coloring(config)
        self.surface = ArraySurface(config.width, config.height, background=parse_color(config.background))
        self.scheduler = RenderScheduler(self.render, coalesce=config.coalesce, arm=arm)
        self.controller = InputController(self.viewport, config.width, config.height, self.scheduler.request)
        self.touch = TouchTracker(self.controller)
        self.on_rendered = on_rendered
        self.render_count = 0

    def render(self) -> None:
        start = time.perf_counter()
        render(
            self.viewport,
            self.surface,
            self.config.width,
            self.config.height,
            self.config.max_iterations,
            self.coloring,
            device=self.config.device,
        )
        self.render_count += 1
        if self.on_rendered is not None:
            self.on_rendered(time.perf_counter() - start)

    def reset(self) -> None:
        self.viewport.update(self.config.zoom, self.config.offset_x, self.config.offset_y)
        self.touch.touch_start()
        self.scheduler.request()
