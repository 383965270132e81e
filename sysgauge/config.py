"""Configuration for sysgauge.

Settings are fixed at DEFAULT_CONFIG; nothing is read from disk, flags or
the environment.
"""

from __future__ import annotations

import copy
from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "refresh_interval": 1.0,
    "frame_interval": 1.0 / 60.0,
    "padding": 2,
    "label_width": 15,
    "min_bar_width": 10,
    "max_bar_width": 80,
    "default_bar_width": 80,
    "sample_budget": 0.5,
    "quit_keys": ["q", "Q"],
    "animation": {
        "time_constant": 0.12,
        "min_step": 0.005,
        "epsilon": 1e-4,
    },
}


def load_config() -> dict[str, Any]:
    """Return a private copy of the defaults, safe for the caller to mutate."""
    return copy.deepcopy(DEFAULT_CONFIG)


def layout_overhead(config: dict[str, Any]) -> int:
    """Cells taken by side padding, the label column and its separator."""
    return int(config["padding"]) * 2 + int(config["label_width"]) + 1
