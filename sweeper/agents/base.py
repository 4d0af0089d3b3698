"""Base class for scheduled agents."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future
from typing import List

from sweeper.agents.health import HealthGate

logger = logging.getLogger(__name__)


class SweeperAgent(ABC):
    """Periodic driver dispatching work units onto a shared executor.

    Attributes:
        executor: Bounded worker pool shared by all agents
        health_gate: Ticks are skipped unless the gate is up
    """

    name = "agent"

    def __init__(self, executor: Executor, health_gate: HealthGate) -> None:
        self.executor = executor
        self.health_gate = health_gate

    def execute(self) -> List[Future]:
        """Run one tick if the process is in service.

        Returns:
            Futures of the work units dispatched during this tick
        """
        if not self.health_gate.is_up():
            logger.debug(f"{self.name}: skipping tick, instance is {self.health_gate.status.value}")
            return []

        try:
            return self.tick()
        except Exception as e:
            logger.exception(f"Failed to execute {self.name}: {e}")
            return []

    @abstractmethod
    def tick(self) -> List[Future]:
        pass
