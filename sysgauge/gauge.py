"""Animated horizontal gauge.

A gauge keeps two fill levels: the fraction currently drawn and the
fraction it is heading toward. Animation is plain data advanced one frame
at a time by ``advance_frame``; the gauge never owns a timer; it hands
back a command when it wants another frame.

Easing is exponential decay toward the target with a floor on the step
size, so the bar slows down as it closes in but still lands on the target
exactly after at most ``ceil(1 / min_step) + 1`` frames.
"""

from __future__ import annotations

import math
from typing import Any

from sysgauge.events import ContinueAnimation, StartAnimation

BAR_FILL = "█"
BAR_EMPTY = "░"


def _clamp_fraction(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


class Gauge:
    def __init__(
        self,
        name: str = "",
        width: int = 80,
        *,
        time_constant: float = 0.12,
        min_step: float = 0.005,
        epsilon: float = 1e-4,
        min_width: int = 10,
        max_width: int = 80,
    ) -> None:
        self.name = name
        self.current_fraction = 0.0
        self.target_fraction = 0.0
        self.time_constant = time_constant
        self.min_step = min_step
        self.epsilon = epsilon
        self.min_width = min_width
        self.max_width = max_width
        self.width = min_width
        self.resize(width)

    @classmethod
    def from_config(cls, name: str, config: dict[str, Any]) -> Gauge:
        anim = config["animation"]
        return cls(
            name,
            int(config["default_bar_width"]),
            time_constant=float(anim["time_constant"]),
            min_step=float(anim["min_step"]),
            epsilon=float(anim["epsilon"]),
            min_width=int(config["min_bar_width"]),
            max_width=int(config["max_bar_width"]),
        )

    def __repr__(self) -> str:
        return (
            f"Gauge({self.name!r}, current={self.current_fraction:.4f}, "
            f"target={self.target_fraction:.4f}, width={self.width})"
        )

    @property
    def animating(self) -> bool:
        return abs(self.target_fraction - self.current_fraction) > self.epsilon

    def set_target(self, value: float) -> StartAnimation | None:
        """Point the gauge at a new fill level (clamped to [0, 1]).

        Returns a StartAnimation command when the bar has somewhere to go,
        None when it is already there.
        """
        self.target_fraction = _clamp_fraction(value)
        if self.target_fraction == self.current_fraction:
            return None
        return StartAnimation(self.name)

    def advance_frame(self, elapsed: float) -> ContinueAnimation | None:
        """Move one easing step toward the target.

        ``elapsed`` is the time since the previous frame in seconds; it
        scales the step so the animation speed doesn't depend on the frame
        rate. Returns ContinueAnimation while the target is still ahead.
        """
        remaining = self.target_fraction - self.current_fraction
        distance = abs(remaining)
        if distance <= self.epsilon:
            self.current_fraction = self.target_fraction
            return None

        if self.time_constant <= 0:
            ease = 1.0
        else:
            ease = 1.0 - math.exp(-max(elapsed, 0.0) / self.time_constant)
        step = max(distance * ease, self.min_step)
        if step >= distance - self.epsilon:
            self.current_fraction = self.target_fraction
            return None

        self.current_fraction = _clamp_fraction(
            self.current_fraction + math.copysign(step, remaining)
        )
        return ContinueAnimation(self.name)

    def resize(self, width: int) -> None:
        self.width = min(max(int(width), self.min_width), self.max_width)

    def render(self) -> str:
        filled = int(round(self.current_fraction * self.width))
        filled = min(max(filled, 0), self.width)
        return BAR_FILL * filled + BAR_EMPTY * (self.width - filled)
