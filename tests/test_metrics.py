"""Tests for sysgauge.metrics."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import psutil
import pytest

from sysgauge.metrics import (
    TRACKED_METRICS,
    sample_cpu,
    sample_memory,
    warm_up,
)


class TestSampleCpu:
    @patch("sysgauge.metrics.psutil.cpu_percent", return_value=42.0)
    def test_success(self, mock_cpu: MagicMock) -> None:
        assert sample_cpu() == (42.0, None)
        mock_cpu.assert_called_once_with(interval=0, percpu=False)

    @patch(
        "sysgauge.metrics.psutil.cpu_percent",
        side_effect=PermissionError("permission denied"),
    )
    def test_os_error(self, mock_cpu: MagicMock) -> None:
        pct, err = sample_cpu()
        assert pct == 0.0
        assert err == "permission denied"

    @patch("sysgauge.metrics.psutil.cpu_percent", side_effect=psutil.AccessDenied())
    def test_psutil_error(self, mock_cpu: MagicMock) -> None:
        pct, err = sample_cpu()
        assert pct == 0.0
        assert err


class TestSampleMemory:
    @patch("sysgauge.metrics.psutil.virtual_memory")
    def test_success(self, mock_vm: MagicMock) -> None:
        mock_vm.return_value = MagicMock(percent=68.5)
        assert sample_memory() == (pytest.approx(68.5), None)

    @patch("sysgauge.metrics.psutil.virtual_memory", side_effect=OSError)
    def test_error_without_message_uses_type_name(self, mock_vm: MagicMock) -> None:
        pct, err = sample_memory()
        assert pct == 0.0
        assert err == "OSError"


class TestWarmUp:
    @patch("sysgauge.metrics.psutil.cpu_percent")
    def test_primes_counters(self, mock_cpu: MagicMock) -> None:
        warm_up()
        mock_cpu.assert_called_once_with(interval=None)

    @patch("sysgauge.metrics.psutil.cpu_percent", side_effect=OSError("no /proc"))
    def test_failure_is_not_raised(self, mock_cpu: MagicMock) -> None:
        warm_up()


def test_tracked_metrics_order() -> None:
    assert list(TRACKED_METRICS) == ["cpu", "memory"]
    assert TRACKED_METRICS["cpu"].label == "CPU:"
    assert TRACKED_METRICS["cpu"].error_label == "CPU"
    assert TRACKED_METRICS["memory"].label == "Memory:"
    assert TRACKED_METRICS["memory"].error_label == "Mem"
