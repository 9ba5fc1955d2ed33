"""Test memory probes."""

import math
from unittest import mock

import pytest

from membench.core import probes
from membench.utils.timer import Timer

SIZE = 64 * 1024
ITERATIONS = 3


class TestProbes:
    """Test the four timed probes."""

    @pytest.mark.parametrize("probe", list(probes.PROBES.values()))
    def test_elapsed_is_finite_and_non_negative(self, probe):
        elapsed = probe(SIZE, ITERATIONS)

        assert isinstance(elapsed, float)
        assert elapsed >= 0
        assert math.isfinite(elapsed)

    def test_probe_order(self):
        """Test the probes run in allocation, free, writes, reads order."""
        assert list(probes.PROBES) == [
            "allocation_seconds",
            "allocate_and_free_seconds",
            "writes_seconds",
            "reads_seconds",
        ]

    def test_buffer_smaller_than_a_page(self):
        assert probes.measure_reads(100, 1) >= 0
        assert probes.measure_allocate_and_free(1, 1) >= 0

    @pytest.mark.parametrize("size_bytes, iterations", [
        (0, 1),
        (-1, 1),
        (SIZE, 0),
        (1.5, 1),
    ])
    def test_rejects_invalid_arguments(self, size_bytes, iterations):
        with pytest.raises(ValueError):
            probes.measure_allocation(size_bytes, iterations)

    def test_sentinel_is_logged(self, monkeypatch):
        """Test the accumulator sink reports a sentinel hit."""
        logger = mock.Mock()
        monkeypatch.setattr(probes, "logger", logger)

        probes._consume(1, probes.HIGH_SENTINEL, "reads")
        logger.warning.assert_not_called()

        probes._consume(probes.HIGH_SENTINEL, probes.HIGH_SENTINEL, "reads")
        logger.warning.assert_called_once()


class TestTimer:
    """Test the wall-clock timer."""

    def test_context_manager_freezes_elapsed(self):
        ticks = iter([0, 1_000_000_000, 3_500_000_000, 9_000_000_000])
        timer = Timer(nano_clock=lambda: next(ticks))

        with timer:
            pass

        assert timer.elapsed_seconds() == 2.5
        assert timer.elapsed_seconds() == 2.5

    def test_elapsed_before_stop(self):
        ticks = iter([0, 2_000_000_000])
        timer = Timer(nano_clock=lambda: next(ticks))

        assert timer.elapsed_seconds() == 2.0
