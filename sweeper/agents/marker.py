"""Marker agent."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import List

from sweeper.agents.base import SweeperAgent
from sweeper.agents.health import HealthGate
from sweeper.config.work import WorkConfigurator
from sweeper.engine.registry import HandlerRegistry
from sweeper.errors import HandlerConfigurationError, HandlerNotFoundError

logger = logging.getLogger(__name__)


class MarkerAgent(SweeperAgent):
    """Dispatches one mark() pass per configured namespace.

    Mark passes are not locked; concurrent clean passes re-validate every
    resource before acting.
    """

    name = "marker"

    def __init__(
        self,
        executor: Executor,
        health_gate: HealthGate,
        registry: HandlerRegistry,
        configurator: WorkConfigurator,
    ) -> None:
        super().__init__(executor, health_gate)
        self.registry = registry
        self.configurator = configurator

    def tick(self) -> List[Future]:
        logger.info("Resource markers started...")
        futures = []
        for work_configuration in self.configurator.list():
            try:
                handler = self.registry.find(work_configuration.resource_type, work_configuration.cloud_provider)
            except (HandlerNotFoundError, HandlerConfigurationError) as e:
                logger.error(f"Cannot mark {work_configuration.namespace}: {e}")
                continue
            futures.append(self.executor.submit(handler.mark, work_configuration))
        return futures
