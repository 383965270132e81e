"""Dashboard state: one gauge per tracked metric plus the error banner.

The dashboard is a reducer. Each ``handle_*`` method mutates the state for
one event and returns the commands the scheduler should act on (next tick,
animation frames, termination). It never touches the terminal or a timer
directly, so it can be exercised with synthetic event sequences.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from sysgauge.config import layout_overhead, load_config
from sysgauge.events import (
    AnimationFrame,
    Command,
    Event,
    Key,
    Quit,
    Resize,
    ScheduleNextTick,
    Terminate,
    Tick,
)
from sysgauge.gauge import Gauge
from sysgauge.metrics import TRACKED_METRICS, Metric

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error: "
ERROR_SEPARATOR = " | "
ELLIPSIS = "..."
CTRL_C = "\x03"


class DashboardState:
    def __init__(
        self,
        config: dict[str, Any] | None = None,
        metrics: dict[str, Metric] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.metrics = dict(TRACKED_METRICS if metrics is None else metrics)
        self.gauges: dict[str, Gauge] = {
            name: Gauge.from_config(name, self.config) for name in self.metrics
        }
        self.terminal_width = 0
        self.error_banner = ""
        self._clock = clock

    @property
    def padding(self) -> int:
        return int(self.config["padding"])

    @property
    def animating(self) -> bool:
        return any(g.animating for g in self.gauges.values())

    # ── Event handlers ─────────────────────────────────────────────────────

    def handle(self, event: Event) -> list[Command]:
        """Route one event to its handler."""
        if isinstance(event, Tick):
            return self.handle_tick()
        if isinstance(event, AnimationFrame):
            return self.handle_animation_frame(event.elapsed)
        if isinstance(event, Resize):
            self.handle_resize(event.width)
            return []
        if isinstance(event, Key):
            return self.handle_key(event.key)
        if isinstance(event, Quit):
            return [self.handle_quit()]
        return []

    def handle_tick(self) -> list[Command]:
        """Sample every metric and retarget its gauge.

        A failed or overrunning read leaves that gauge's target alone and
        lands in the banner. The next tick is scheduled no matter what.
        """
        commands: list[Command] = []
        budget = float(self.config["sample_budget"])
        self.error_banner = ""

        for name, metric in self.metrics.items():
            started = self._clock()
            pct, err = metric.sampler()
            took = self._clock() - started
            if err is None and took > budget:
                err = f"sample took {took:.2f}s"

            if err is not None:
                msg = f"{metric.error_label} Err: {err}"
                logger.warning("%s", msg)
                self.error_banner = self._append_error(self.error_banner, msg)
                continue

            cmd = self.gauges[name].set_target(pct / 100.0)
            if cmd is not None:
                commands.append(cmd)

        commands.append(ScheduleNextTick(float(self.config["refresh_interval"])))
        return commands

    def handle_resize(self, width: int) -> None:
        self.terminal_width = max(0, int(width))
        bar_width = self.terminal_width - layout_overhead(self.config)
        for gauge in self.gauges.values():
            gauge.resize(bar_width)

    def handle_animation_frame(self, elapsed: float) -> list[Command]:
        commands: list[Command] = []
        for gauge in self.gauges.values():
            cmd = gauge.advance_frame(elapsed)
            if cmd is not None:
                commands.append(cmd)
        return commands

    def handle_key(self, key: str) -> list[Command]:
        """Quit keys terminate; everything else is ignored."""
        if key == CTRL_C or key in self.config["quit_keys"]:
            return [self.handle_quit()]
        return []

    def handle_quit(self) -> Terminate:
        return Terminate()

    # ── Banner ─────────────────────────────────────────────────────────────

    def _banner_room(self) -> int | None:
        """Characters available after the "Error: " prefix; None if width unknown."""
        if self.terminal_width <= 0:
            return None
        return max(0, self.terminal_width - self.padding * 2 - len(ERROR_PREFIX))

    def _append_error(self, existing: str, new: str) -> str:
        """Join errors without letting the banner outgrow the terminal."""
        combined = existing + ERROR_SEPARATOR + new if existing else new
        max_len = self._banner_room()
        if max_len is None or len(combined) <= max_len:
            return combined
        if max_len <= len(ELLIPSIS):
            return ELLIPSIS[:max_len]
        return combined[: max_len - len(ELLIPSIS)] + ELLIPSIS

    # ── Rendering ──────────────────────────────────────────────────────────

    def render(self) -> str:
        """Lay out every gauge and the banner as plain text."""
        pad = " " * self.padding
        label_width = int(self.config["label_width"])
        lines = [""]

        for name, gauge in self.gauges.items():
            label = self.metrics[name].label
            lines.append(f"{pad}{label:<{label_width}.{label_width}} {gauge.render()}")
            lines.append("")

        if self.error_banner:
            banner = ERROR_PREFIX + self.error_banner
            if self.terminal_width > 0:
                banner = banner[: max(0, self.terminal_width - self.padding * 2)]
            lines.append(pad + banner)

        return "\n".join(lines)
