"""Periodic agent scheduling on daemon threads."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sweeper.agents.base import SweeperAgent
from sweeper.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


@dataclass
class _ScheduledAgent:
    agent: SweeperAgent
    interval_seconds: float
    initial_delay_seconds: float
    thread: Optional[threading.Thread] = None
    tick_count: int = 0
    last_tick: Optional[datetime] = None


class AgentScheduler:
    """Runs each agent on its own fixed-delay loop.

    The next tick of an agent starts interval_seconds after the previous
    tick has dispatched its work, so ticks of one agent never overlap.

    Example:
        >>> scheduler = AgentScheduler()
        >>> scheduler.add(marker_agent, interval_seconds=3600)
        >>> scheduler.start()
        >>> # ... later ...
        >>> scheduler.stop()
    """

    def __init__(self) -> None:
        self._stop_event = threading.Event()
        self._agents: List[_ScheduledAgent] = []
        self._lock = threading.Lock()
        self._started = False

    def add(self, agent: SweeperAgent, interval_seconds: float, initial_delay_seconds: float = 0.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if self._started:
            raise RuntimeError("Cannot add agents to a running scheduler")
        self._agents.append(_ScheduledAgent(agent, interval_seconds, initial_delay_seconds))

    def start(self) -> None:
        if self._started:
            logger.warning("AgentScheduler already started")
            return

        self._stop_event.clear()
        for scheduled in self._agents:
            scheduled.thread = threading.Thread(
                target=self._loop, args=(scheduled,), daemon=True, name=f"sweeper-{scheduled.agent.name}"
            )
            scheduled.thread.start()
        self._started = True

    def _loop(self, scheduled: _ScheduledAgent) -> None:
        logger.info(f"{scheduled.agent.name} agent started (interval={scheduled.interval_seconds}s)")
        delay = scheduled.initial_delay_seconds
        while not self._stop_event.wait(delay):
            with self._lock:
                scheduled.tick_count += 1
                scheduled.last_tick = utcnow()
            scheduled.agent.execute()
            delay = scheduled.interval_seconds
        logger.info(f"{scheduled.agent.name} agent stopped")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop all loops, waiting up to timeout seconds per agent."""
        if not self._started:
            return

        self._stop_event.set()
        for scheduled in self._agents:
            if scheduled.thread is not None:
                scheduled.thread.join(timeout=timeout)
                if scheduled.thread.is_alive():
                    logger.warning(f"{scheduled.agent.name} agent did not stop cleanly")
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started and any(s.thread is not None and s.thread.is_alive() for s in self._agents)

    def health(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "healthy": self.is_running,
                "agents": {
                    s.agent.name: {
                        "tick_count": s.tick_count,
                        "last_tick": s.last_tick.isoformat() if s.last_tick else None,
                        "interval_seconds": s.interval_seconds,
                    }
                    for s in self._agents
                },
            }
