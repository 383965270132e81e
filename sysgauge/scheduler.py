"""Cooperative event loop driving the dashboard.

One thread, one queue. Timers (the next tick, the next animation frame) and
terminal input are turned into events, and each event is handled to
completion, then rendered, before the next one is taken off the queue.
Handlers never call back into the scheduler; they return commands which
the scheduler turns into armed timers.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

from sysgauge.dashboard import DashboardState
from sysgauge.events import (
    RESIZE_KEY,
    AnimationFrame,
    Command,
    Event,
    FrameRequest,
    Key,
    Quit,
    Resize,
    ScheduleNextTick,
    Terminate,
    Tick,
)

logger = logging.getLogger(__name__)

RUNNING = "running"
TERMINATED = "terminated"


class RenderError(RuntimeError):
    """The screen could not be drawn. Fatal to the loop."""


class Screen(Protocol):
    def width(self) -> int: ...

    def read_key(self, timeout: float | None) -> str | None:
        """Wait up to *timeout* seconds for a key; None if nothing arrived."""
        ...

    def draw(self, text: str) -> None: ...


class EventScheduler:
    def __init__(
        self,
        dashboard: DashboardState,
        screen: Screen,
        clock: Callable[[], float] = time.monotonic,
        frame_interval: float | None = None,
    ) -> None:
        self.dashboard = dashboard
        self.screen = screen
        self.state = RUNNING
        if frame_interval is None:
            frame_interval = float(dashboard.config["frame_interval"])
        self.frame_interval = frame_interval
        self._clock = clock
        self._queue: deque[Event] = deque()
        self._tick_due: float | None = None
        self._frame_due: float | None = None
        self._last_frame: float | None = None

    @property
    def running(self) -> bool:
        return self.state == RUNNING

    @property
    def tick_pending(self) -> bool:
        return self._tick_due is not None

    @property
    def frame_pending(self) -> bool:
        return self._frame_due is not None

    def post(self, event: Event) -> None:
        if self.running:
            self._queue.append(event)

    def request_quit(self) -> None:
        """Queue a Quit; it takes effect once the current event is done."""
        self.post(Quit())

    # ── Delivery ───────────────────────────────────────────────────────────

    def dispatch(self, event: Event) -> None:
        """Handle one event to completion, act on its commands, redraw."""
        if not self.running:
            return
        commands = self.dashboard.handle(event)
        self._apply(commands)
        if isinstance(event, AnimationFrame) and self._frame_due is None:
            # Animation settled; the next one starts with a fresh frame clock.
            self._last_frame = None
        if self.running:
            self.screen.draw(self.dashboard.render())

    def _apply(self, commands: list[Command]) -> None:
        now = self._clock()
        for cmd in commands:
            if isinstance(cmd, Terminate):
                self._terminate()
                return
            if isinstance(cmd, ScheduleNextTick):
                self._tick_due = now + cmd.interval
            elif isinstance(cmd, FrameRequest) and self._frame_due is None:
                self._frame_due = now + self.frame_interval

    def _terminate(self) -> None:
        logger.debug("scheduler terminated with %d queued events", len(self._queue))
        self.state = TERMINATED
        self._queue.clear()
        self._tick_due = None
        self._frame_due = None

    # ── Loop ───────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Size the gauges and arm the first tick, one interval out."""
        self.post(Resize(self.screen.width()))
        self._apply([ScheduleNextTick(float(self.dashboard.config["refresh_interval"]))])

    def run(self) -> None:
        """Deliver events until a Quit is handled."""
        self.start()
        while self.running:
            if self._queue:
                self.dispatch(self._queue.popleft())
                continue
            self._wait_for_input()
            self._fire_due_timers()

    def _next_timeout(self) -> float | None:
        pending = [due for due in (self._tick_due, self._frame_due) if due is not None]
        if not pending:
            return None
        return max(0.0, min(pending) - self._clock())

    def _wait_for_input(self) -> None:
        try:
            key = self.screen.read_key(self._next_timeout())
        except KeyboardInterrupt:
            self.request_quit()
            return
        if key is None:
            return
        if key == RESIZE_KEY:
            self.post(Resize(self.screen.width()))
        else:
            self.post(Key(key))

    def _fire_due_timers(self) -> None:
        now = self._clock()
        if self._tick_due is not None and now >= self._tick_due:
            self._tick_due = None
            self.post(Tick())
        if self._frame_due is not None and now >= self._frame_due:
            self._frame_due = None
            if self._last_frame is None:
                elapsed = self.frame_interval
            else:
                elapsed = now - self._last_frame
            self._last_frame = now
            self.post(AnimationFrame(elapsed))
