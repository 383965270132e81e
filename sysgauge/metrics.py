"""Host metric sampling for the gauges.

Each sampler returns ``(percent, error)``. On success ``error`` is None;
on failure ``percent`` is 0.0 and ``error`` carries a short message. The
samplers never raise and never sleep.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import psutil

logger = logging.getLogger(__name__)

Sample = tuple[float, str | None]


@dataclass(frozen=True)
class Metric:
    """A tracked metric: display label, banner label and its sampler."""

    label: str
    error_label: str
    sampler: Callable[[], Sample]


def _describe(err: BaseException) -> str:
    msg = str(err).strip()
    return msg or type(err).__name__


def warm_up() -> None:
    """Prime psutil's CPU counters.

    With a zero-length window the first cpu_percent() call has no previous
    sample to diff against and always reports 0.0.
    """
    try:
        psutil.cpu_percent(interval=None)
    except (psutil.Error, OSError) as e:
        logger.warning("CPU warm-up failed: %s", e)


def sample_cpu() -> Sample:
    """Aggregate CPU load since the previous call, in percent."""
    try:
        pct = psutil.cpu_percent(interval=0, percpu=False)
    except (psutil.Error, OSError) as e:
        return 0.0, _describe(e)
    return float(pct), None


def sample_memory() -> Sample:
    """Used share of physical memory, in percent."""
    try:
        vm = psutil.virtual_memory()
    except (psutil.Error, OSError) as e:
        return 0.0, _describe(e)
    return float(vm.percent), None


# Display order is insertion order.
TRACKED_METRICS: dict[str, Metric] = {
    "cpu": Metric(label="CPU:", error_label="CPU", sampler=sample_cpu),
    "memory": Metric(label="Memory:", error_label="Mem", sampler=sample_memory),
}
