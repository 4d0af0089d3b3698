"""Tests for metrics backends."""

from __future__ import annotations

import pytest

from sweeper.observability.metrics import InMemoryMetrics, NullMetrics


class TestInMemoryMetrics:
    """Test suite for InMemoryMetrics."""

    def test_counter_by_tags(self) -> None:
        metrics = InMemoryMetrics()
        metrics.increment("sweeper.resources.candidates", {"configuration": "a"})
        metrics.increment("sweeper.resources.candidates", {"configuration": "a"})
        metrics.increment("sweeper.resources.candidates", {"configuration": "b"}, value=3)

        assert metrics.counter_value("sweeper.resources.candidates", {"configuration": "a"}) == 2
        assert metrics.counter_value("sweeper.resources.candidates") == 5
        assert metrics.counter_value("sweeper.unknown") == 0

    def test_counter_rejects_negative_increment(self) -> None:
        with pytest.raises(ValueError):
            InMemoryMetrics().increment("c", value=-1)

    def test_timer_reports_once(self) -> None:
        metrics = InMemoryMetrics()
        timer = metrics.start_timer("sweeper.mark.duration", {"configuration": "a"})

        timer.stop()
        timer.stop()

        assert metrics.timer_count("sweeper.mark.duration") == 1

    def test_timer_as_context_manager(self) -> None:
        metrics = InMemoryMetrics()

        with metrics.start_timer("sweeper.mark.duration"):
            pass

        assert metrics.timer_count("sweeper.mark.duration") == 1

    def test_collect(self) -> None:
        metrics = InMemoryMetrics()
        metrics.increment("c", {"k": "v"})
        metrics.record_duration("t", 1.5)

        rows = metrics.collect()

        assert {"name": "c", "type": "counter", "tags": {"k": "v"}, "value": 1.0} in rows
        assert {"name": "t", "type": "timer", "tags": {}, "count": 1, "total": 1.5} in rows


def test_null_metrics_timer_is_harmless() -> None:
    with NullMetrics().start_timer("sweeper.mark.duration") as timer:
        pass

    assert timer.stop() >= 0
