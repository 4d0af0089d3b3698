"""Cleaner agent."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import Dict, List

from sweeper.agents.base import SweeperAgent
from sweeper.agents.health import HealthGate
from sweeper.config.work import WorkConfigurator
from sweeper.engine.registry import HandlerRegistry
from sweeper.errors import HandlerConfigurationError, HandlerNotFoundError
from sweeper.locks.base import DEFAULT_LOCK_TTL_SECONDS, LockManager, clean_lock_key
from sweeper.models.marked_resource import MarkedResource
from sweeper.store.base import ResourceTrackingStore

logger = logging.getLogger(__name__)


class CleanerAgent(SweeperAgent):
    """Dispatches clean() for every clean-eligible entry.

    Entries are grouped by namespace and a namespace is only processed by the
    worker that wins its lock. Losing the lock is not an error: another worker
    owns that namespace's clean pass until the lock expires.

    Attributes:
        lock_ttl_seconds: Lifetime of a namespace clean lock
    """

    name = "cleaner"

    def __init__(
        self,
        executor: Executor,
        health_gate: HealthGate,
        registry: HandlerRegistry,
        configurator: WorkConfigurator,
        store: ResourceTrackingStore,
        lock_manager: LockManager,
        lock_ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS,
    ) -> None:
        super().__init__(executor, health_gate)
        self.registry = registry
        self.configurator = configurator
        self.store = store
        self.lock_manager = lock_manager
        self.lock_ttl_seconds = lock_ttl_seconds

    def tick(self) -> List[Future]:
        logger.info("Resource cleaners started...")
        by_namespace: Dict[str, List[MarkedResource]] = {}
        for marked_resource in self.store.list_clean_eligible():
            by_namespace.setdefault(marked_resource.namespace, []).append(marked_resource)

        futures = []
        for namespace, marked_resources in by_namespace.items():
            work_configuration = self.configurator.find(namespace)
            if work_configuration is None:
                logger.warning(f"No work configuration for namespace {namespace}, skipping {len(marked_resources)} entries")
                continue

            if not self.lock_manager.acquire(clean_lock_key(namespace), self.lock_ttl_seconds):
                logger.debug(f"Clean of {namespace} owned by another worker, skipping")
                continue

            for marked_resource in marked_resources:
                try:
                    handler = self.registry.find(marked_resource.resource_type, marked_resource.cloud_provider)
                except (HandlerNotFoundError, HandlerConfigurationError) as e:
                    logger.error(f"Cannot clean namespace {namespace}: {e}")
                    break
                futures.append(self.executor.submit(handler.clean, marked_resource, work_configuration))

        return futures
