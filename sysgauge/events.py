"""Events delivered to the dashboard and commands it hands back."""

from __future__ import annotations

from dataclasses import dataclass

# ── Events ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class AnimationFrame:
    elapsed: float


@dataclass(frozen=True)
class Resize:
    width: int


@dataclass(frozen=True)
class Key:
    key: str


@dataclass(frozen=True)
class Quit:
    pass


Event = Tick | AnimationFrame | Resize | Key | Quit


# ── Commands ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScheduleNextTick:
    interval: float


@dataclass(frozen=True)
class FrameRequest:
    """Ask the scheduler for one AnimationFrame on behalf of a gauge."""

    metric: str = ""


@dataclass(frozen=True)
class StartAnimation(FrameRequest):
    pass


@dataclass(frozen=True)
class ContinueAnimation(FrameRequest):
    pass


@dataclass(frozen=True)
class Terminate:
    pass


Command = ScheduleNextTick | FrameRequest | Terminate

# Pseudo-key a Screen reports when the terminal has been resized.
RESIZE_KEY = "KEY_RESIZE"
