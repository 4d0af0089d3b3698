"""Process bootstrap: wires stores, locks, handlers and agents from Config."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List

from sweeper.agents.cleaner import CleanerAgent
from sweeper.agents.health import HealthGate
from sweeper.agents.marker import MarkerAgent
from sweeper.agents.notifier import NotifierAgent
from sweeper.agents.scheduler import AgentScheduler
from sweeper.cli.config import Config
from sweeper.config.work import WorkConfigurator
from sweeper.engine.registry import HandlerRegistry
from sweeper.events.audit import AuditListener, AuditStorage
from sweeper.events.bus import EventBus
from sweeper.handlers.aws_image import AwsImageHandler
from sweeper.locks.sqlite import SqliteLockManager
from sweeper.notifications.base import LoggingNotifier, Notifier
from sweeper.notifications.sns import SnsNotifier
from sweeper.observability.metrics import InMemoryMetrics
from sweeper.rules.age import AgeRule
from sweeper.rules.base import Rule
from sweeper.rules.tags import MissingTagRule
from sweeper.store.yaml_store import YamlTrackingStore

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Fully wired sweeper components."""

    config: Config
    configurator: WorkConfigurator
    store: YamlTrackingStore
    event_bus: EventBus
    audit_storage: AuditStorage
    metrics: InMemoryMetrics
    registry: HandlerRegistry
    lock_manager: SqliteLockManager
    health_gate: HealthGate
    executor: ThreadPoolExecutor
    marker: MarkerAgent
    notifier: NotifierAgent
    cleaner: CleanerAgent

    def scheduler(self) -> AgentScheduler:
        scheduler = AgentScheduler()
        scheduler.add(self.marker, self.config.mark_interval_seconds)
        scheduler.add(self.notifier, self.config.notify_interval_seconds, initial_delay_seconds=60.0)
        if self.config.clean_enabled:
            scheduler.add(self.cleaner, self.config.clean_interval_seconds, initial_delay_seconds=120.0)
        else:
            logger.info("Cleaner agent disabled (clean_enabled=false)")
        return scheduler

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)


def build_rules(config: Config) -> List[Rule]:
    rules: List[Rule] = [AgeRule(config.max_age_days)]
    if config.required_tag:
        rules.append(MissingTagRule(config.required_tag))
    return rules


def build_notifier(config: Config) -> Notifier:
    if config.sns_topic_arn:
        return SnsNotifier(config.sns_topic_arn, aws_profile=config.aws_profile)
    return LoggingNotifier()


def build_runtime(config: Config) -> Runtime:
    """Build every component from configuration.

    Raises:
        ConfigurationError: If the work configuration file is missing or invalid
        HandlerNotFoundError: If a configured namespace has no handler
    """
    configurator = WorkConfigurator.from_file(config.work_path)
    store = YamlTrackingStore(config.tracking_path)
    event_bus = EventBus()
    audit_storage = AuditStorage(config.audit_path)
    AuditListener(audit_storage).attach(event_bus)
    metrics = InMemoryMetrics()

    registry = HandlerRegistry()
    registry.register(
        AwsImageHandler(
            build_rules(config),
            store,
            event_bus,
            metrics=metrics,
            aws_profile=config.aws_profile,
        ),
        claims=[(AwsImageHandler.RESOURCE_TYPE, AwsImageHandler.CLOUD_PROVIDER)],
    )
    registry.validate(configurator.handler_pairs())

    lock_manager = SqliteLockManager(config.locks_path)
    health_gate = HealthGate()
    executor = ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="sweeper-worker")

    return Runtime(
        config=config,
        configurator=configurator,
        store=store,
        event_bus=event_bus,
        audit_storage=audit_storage,
        metrics=metrics,
        registry=registry,
        lock_manager=lock_manager,
        health_gate=health_gate,
        executor=executor,
        marker=MarkerAgent(executor, health_gate, registry, configurator),
        notifier=NotifierAgent(executor, health_gate, configurator, store, build_notifier(config)),
        cleaner=CleanerAgent(
            executor,
            health_gate,
            registry,
            configurator,
            store,
            lock_manager,
            lock_ttl_seconds=config.lock_ttl_seconds,
        ),
    )
