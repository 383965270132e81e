"""Terminal front end for sysgauge.

Animated CPU and memory gauges drawn with curses. Press q (or Ctrl+C) to
quit.

Usage:
    uv run sysgauge
"""

from __future__ import annotations

import argparse
import curses
import logging
import math
import signal
import sys
from types import FrameType
from typing import Any

from sysgauge import metrics
from sysgauge.config import load_config
from sysgauge.dashboard import ERROR_PREFIX, DashboardState
from sysgauge.events import RESIZE_KEY
from sysgauge.scheduler import EventScheduler, RenderError

logger = logging.getLogger(__name__)

# Curses colour-pair IDs
C_NORMAL = 1
C_CRITICAL = 2


def _init_colors() -> None:
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(C_NORMAL, curses.COLOR_GREEN, -1)
    curses.init_pair(C_CRITICAL, curses.COLOR_RED, -1)


def _safe(win: curses.window, *args: Any) -> None:
    """addstr wrapper that swallows out-of-bounds errors."""
    try:
        win.addstr(*args)
    except curses.error:
        pass


class CursesScreen:
    """Screen backed by a curses window."""

    def __init__(self, stdscr: curses.window, colors: bool = False) -> None:
        self.stdscr = stdscr
        self.colors = colors
        stdscr.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # terminal can't hide the cursor

    def width(self) -> int:
        return self.stdscr.getmaxyx()[1]

    def read_key(self, timeout: float | None) -> str | None:
        """Wait for a key. None on timeout or for keys with no character."""
        if timeout is None:
            self.stdscr.timeout(-1)
        else:
            self.stdscr.timeout(math.ceil(timeout * 1000))
        key = self.stdscr.getch()
        if key == curses.KEY_RESIZE:
            return RESIZE_KEY
        if 0 <= key < 256:
            return chr(key)
        return None

    def _attr(self, line: str) -> int:
        if not self.colors:
            return curses.A_NORMAL
        if line.lstrip().startswith(ERROR_PREFIX):
            return curses.color_pair(C_CRITICAL) | curses.A_BOLD
        return curses.color_pair(C_NORMAL)

    def draw(self, text: str) -> None:
        try:
            self.stdscr.erase()
            max_y, max_x = self.stdscr.getmaxyx()
            for y, line in enumerate(text.split("\n")):
                if y >= max_y:
                    break
                if line:
                    _safe(self.stdscr, y, 0, line[:max_x], self._attr(line))
            self.stdscr.refresh()
        except curses.error as e:
            raise RenderError(f"cannot draw to terminal: {e}") from e


def _silence_logging() -> None:
    """Keep log records off the terminal curses is drawing on."""
    root = logging.getLogger("sysgauge")
    root.addHandler(logging.NullHandler())
    root.propagate = False


def _run(stdscr: curses.window, config: dict[str, Any]) -> None:
    has_colors = curses.has_colors()
    if has_colors:
        _init_colors()
    screen = CursesScreen(stdscr, colors=has_colors)
    scheduler = EventScheduler(DashboardState(config), screen)

    def _on_sigterm(signum: int, frame: FrameType | None) -> None:
        scheduler.request_quit()

    previous = signal.signal(signal.SIGTERM, _on_sigterm)
    try:
        scheduler.run()
    finally:
        signal.signal(signal.SIGTERM, previous)


def main() -> None:
    argparse.ArgumentParser(
        description="Animated CPU and memory gauges for the terminal.",
    ).parse_args()

    _silence_logging()
    config = load_config()
    metrics.warm_up()

    try:
        curses.wrapper(_run, config)
    except KeyboardInterrupt:
        pass
    except (RenderError, curses.error) as e:
        logger.error("display failed: %s", e)
        print(f"Error running program: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
