"""Tests for AgentScheduler and HealthGate."""

from __future__ import annotations

import threading
from unittest.mock import Mock

import pytest

from sweeper.agents.health import HealthGate, HealthStatus
from sweeper.agents.scheduler import AgentScheduler


def _agent(name: str = "marker") -> Mock:
    agent = Mock()
    agent.name = name
    return agent


class TestAgentScheduler:
    """Test suite for AgentScheduler lifecycle."""

    def test_ticks_agents_until_stopped(self) -> None:
        ticked = threading.Event()
        agent = _agent()
        agent.execute.side_effect = lambda: ticked.set() or []
        scheduler = AgentScheduler()
        scheduler.add(agent, interval_seconds=0.01)

        scheduler.start()
        try:
            assert ticked.wait(timeout=2.0) is True
            assert scheduler.is_running is True
        finally:
            scheduler.stop()

        assert scheduler.is_running is False
        assert scheduler.health()["agents"]["marker"]["tick_count"] >= 1

    def test_initial_delay_defers_first_tick(self) -> None:
        agent = _agent()
        scheduler = AgentScheduler()
        scheduler.add(agent, interval_seconds=60, initial_delay_seconds=60)

        scheduler.start()
        scheduler.stop()

        agent.execute.assert_not_called()

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            AgentScheduler().add(_agent(), interval_seconds=0)

    def test_cannot_add_while_running(self) -> None:
        scheduler = AgentScheduler()
        scheduler.add(_agent(), interval_seconds=60, initial_delay_seconds=60)
        scheduler.start()
        try:
            with pytest.raises(RuntimeError):
                scheduler.add(_agent("cleaner"), interval_seconds=60)
        finally:
            scheduler.stop()

    def test_health_reports_each_agent(self) -> None:
        scheduler = AgentScheduler()
        scheduler.add(_agent("marker"), interval_seconds=60)
        scheduler.add(_agent("cleaner"), interval_seconds=120)

        health = scheduler.health()

        assert health["healthy"] is False
        assert health["agents"]["cleaner"] == {"tick_count": 0, "last_tick": None, "interval_seconds": 120}


class TestHealthGate:
    """Test suite for HealthGate."""

    def test_defaults_to_up(self) -> None:
        assert HealthGate().is_up() is True

    def test_set_status(self) -> None:
        gate = HealthGate()

        gate.set_status(HealthStatus.OUT_OF_SERVICE)

        assert gate.is_up() is False
        assert gate.status == HealthStatus.OUT_OF_SERVICE
