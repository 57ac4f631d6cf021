"""Gesture handling: turns normalized input events into viewport updates."""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence

from .errors import DegenerateGesture, InvalidViewport
from .plane import ViewportState, pan_by, zoom_at

WHEEL_ZOOM_FACTOR = 1.1


class RenderScheduler:
    """Decide when a requested re-render actually runs.

    Without coalescing every request renders immediately. With coalescing a
    request only marks the scheduler dirty and calls ``arm`` (typically to
    restart a host timer); :meth:`flush` then renders once for the burst.
    """

    def __init__(self, render: Callable[[], None], *, coalesce: bool = False, arm: Optional[Callable[[], None]] = None) -> None:
        self._render = render
        self.coalesce = coalesce
        self.arm = arm
        self.pending = False

    def request(self) -> None:
        if not self.coalesce:
            self._render()
            return
        self.pending = True
        if self.arm is not None:
            self.arm()

    def flush(self) -> bool:
        if not self.pending:
            return False
        self.pending = False
        self._render()
        return True


class InputController:
    """Apply zoom, pan and pinch gestures to a viewport.

    Each handler returns ``True`` when the gesture changed the viewport (and a
    render was requested) and ``False`` when it was ignored.
    """

    def __init__(self, viewport: ViewportState, width: int, height: int, request_render: Callable[[], None]) -> None:
        self.viewport = viewport
        self.width = width
        self.height = height
        self.request_render = request_render
        self.last_rejection: Optional[Exception] = None

    def _apply(self, transition: Callable[[], None]) -> bool:
        try:
            transition()
        except (InvalidViewport, DegenerateGesture) as exc:
            self.last_rejection = exc
            return False
        self.last_rejection = None
        self.request_render()
        return True

    def on_zoom(self, cursor_x: float, cursor_y: float, scroll_delta_sign: float) -> bool:
        def transition() -> None:
            if scroll_delta_sign > 0:
                factor = WHEEL_ZOOM_FACTOR
            elif scroll_delta_sign < 0:
                factor = 1 / WHEEL_ZOOM_FACTOR
            else:
                raise DegenerateGesture("scroll without a direction")
            zoom_at(self.viewport, cursor_x, cursor_y, factor, self.width, self.height)

        return self._apply(transition)

    def on_pan(self, movement_x: float, movement_y: float) -> bool:
        return self._apply(lambda: pan_by(self.viewport, movement_x, movement_y))

    def on_pinch_zoom(self, mid_x: float, mid_y: float, distance_ratio: float) -> bool:
        def transition() -> None:
            if not math.isfinite(distance_ratio) or distance_ratio <= 0:
                raise DegenerateGesture(f"pinch ratio must be positive, got {distance_ratio!r}")
            zoom_at(self.viewport, mid_x, mid_y, distance_ratio, self.width, self.height)

        return self._apply(transition)


class TouchTracker:
    """Touch-session state feeding an :class:`InputController`.

    One finger pans by its movement since the previous event. Two fingers
    pinch around their midpoint by the change in finger distance since the
    previous event, so the zoom across a whole gesture equals the overall
    distance ratio.
    """

    def __init__(self, controller: InputController) -> None:
        self.controller = controller
        self.touch_start()

    def touch_start(self) -> None:
        self.last_x: Optional[float] = None
        self.last_y: Optional[float] = None
        self.initial_distance: Optional[float] = None

    def touch_move(self, touches: Sequence[tuple[float, float]]) -> bool:
        try:
            if len(touches) == 1:
                return self._single(touches[0])
            if len(touches) == 2:
                return self._pinch(touches[0], touches[1])
            raise DegenerateGesture(f"unsupported touch count {len(touches)}")
        except DegenerateGesture as exc:
            self.controller.last_rejection = exc
            return False

    def _single(self, touch: tuple[float, float]) -> bool:
        x, y = touch
        previous = (self.last_x, self.last_y)
        self.last_x, self.last_y = x, y
        self.initial_distance = None
        if previous[0] is None or previous[1] is None:
            raise DegenerateGesture("first touch move only records the baseline")
        return self.controller.on_pan(x - previous[0], y - previous[1])

    def _pinch(self, first: tuple[float, float], second: tuple[float, float]) -> bool:
        distance = math.hypot(first[0] - second[0], first[1] - second[1])
        baseline = self.initial_distance
        self.last_x = self.last_y = None
        if baseline is None or baseline <= 0:
            self.initial_distance = distance
            raise DegenerateGesture("pinch has no baseline distance yet")
        mid_x = (first[0] + second[0]) / 2
        mid_y = (first[1] + second[1]) / 2
        applied = self.controller.on_pinch_zoom(mid_x, mid_y, distance / baseline)
        if applied:
            self.initial_distance = distance
        return applied
