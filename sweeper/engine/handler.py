"""Resource handler: the mark/clean lifecycle engine.

A handler owns one (resource_type, cloud_provider) pair. Subclasses supply the
provider-specific pieces (listing, fetching and deleting upstream resources);
this base class owns every tracking-state transition.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence

from sweeper.engine.exclusions import ExclusionChecker
from sweeper.engine.owner import OwnerResolver, TagOwnerResolver
from sweeper.events.bus import EventBus
from sweeper.events.models import EventType, ResourceEvent
from sweeper.models.marked_resource import MarkedResource
from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary
from sweeper.models.work_configuration import WorkConfiguration
from sweeper.observability.metrics import Metrics, NullMetrics
from sweeper.rules.base import Rule
from sweeper.store.base import ResourceTrackingStore
from sweeper.utils.timestamps import days_from_now, utcnow

logger = logging.getLogger(__name__)

MARK_DURATION = "sweeper.mark.duration"
CANDIDATES_COUNT = "sweeper.resources.candidates"
CLEAN_OUTCOMES = "sweeper.clean.outcomes"


class CleanOutcome(Enum):
    """Result of one clean() call."""

    VANISHED = "vanished"
    EXCLUDED = "excluded"
    UNMARKED = "unmarked"
    DELETED = "deleted"
    WAITING = "waiting"
    DRY_RUN = "dry-run"
    FAILED = "failed"


@dataclass
class MarkResult:
    """Counts from one mark() pass over a namespace.

    Attributes:
        namespace: Namespace that was scanned
        dry_run: Whether the pass ran in dry-run mode
        fetched: Upstream resources returned by the provider
        excluded: Resources dropped by exclusions
        candidates: New violators found (counted in dry-run too)
        marked: New entries persisted
        unmarked: Entries removed because the resource became compliant
        failed: Resources whose processing raised
        error: Namespace-level failure message (optional)
    """

    namespace: str
    dry_run: bool
    fetched: int = 0
    excluded: int = 0
    candidates: int = 0
    marked: int = 0
    unmarked: int = 0
    failed: int = 0
    error: Optional[str] = None


class ResourceHandler(ABC):
    """Base class for per-resource-type handlers.

    Attributes:
        rules: Rules evaluated against every in-scope resource
        store: Tracking store shared by all handlers
        exclusion_checker: Process-wide exclusion evaluation
        owner_resolver: Resolves owners for new marks
        event_bus: Receives MARK, UNMARK and DELETE events
        metrics: Counters and timers
        clock: Source of current UTC time
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        store: ResourceTrackingStore,
        event_bus: EventBus,
        exclusion_checker: Optional[ExclusionChecker] = None,
        owner_resolver: Optional[OwnerResolver] = None,
        metrics: Optional[Metrics] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.rules = list(rules)
        self.store = store
        self.event_bus = event_bus
        self.exclusion_checker = exclusion_checker or ExclusionChecker()
        self.owner_resolver = owner_resolver or TagOwnerResolver()
        self.metrics = metrics or NullMetrics()
        self.clock = clock

    @abstractmethod
    def handles(self, resource_type: str, cloud_provider: str) -> bool:
        """True if this handler claims the (resource_type, cloud_provider) pair."""
        pass

    @abstractmethod
    def get_upstream_resources(self, work_configuration: WorkConfiguration) -> Optional[List[Resource]]:
        """List the namespace's current inventory. None or empty means no work."""
        pass

    @abstractmethod
    def get_upstream_resource(
        self, marked_resource: MarkedResource, work_configuration: WorkConfiguration
    ) -> Optional[Resource]:
        """Fetch the current snapshot of one resource, or None if it no longer exists."""
        pass

    @abstractmethod
    def delete_resource(self, marked_resource: MarkedResource, work_configuration: WorkConfiguration) -> None:
        """Delete the upstream resource. Raise on failure."""
        pass

    def mark(
        self,
        work_configuration: WorkConfiguration,
        post_mark: Optional[Callable[[], None]] = None,
    ) -> MarkResult:
        """Find and track cleanup candidates in one namespace.

        Newly violating resources are marked, previously marked resources
        that are now compliant are forgiven. In dry-run mode every decision
        is computed and counted but nothing is persisted or published.

        Args:
            work_configuration: Namespace to scan
            post_mark: Invoked after the pass whether it succeeded or not

        Returns:
            MarkResult with per-pass counts
        """
        namespace = work_configuration.namespace
        result = MarkResult(namespace=namespace, dry_run=work_configuration.dry_run)
        timer = self.metrics.start_timer(MARK_DURATION, {"configuration": namespace})
        try:
            logger.info(f"{type(self).__name__}: getting resources with namespace {namespace}")
            upstream_resources = self.get_upstream_resources(work_configuration) or []
            result.fetched = len(upstream_resources)
            logger.info(
                f"Fetched {result.fetched} resources with namespace {namespace}, "
                f"dryRun {work_configuration.dry_run}"
            )

            now = self.clock()
            for resource in upstream_resources:
                try:
                    self._mark_resource(resource, work_configuration, now, result)
                except Exception as e:
                    result.failed += 1
                    logger.exception(f"Failed to mark resource {resource.resource_id} in {namespace}: {e}")

        except Exception as e:
            result.error = str(e)
            logger.exception(f"Failed while marking namespace {namespace}: {e}")
        finally:
            try:
                if post_mark is not None:
                    post_mark()
            finally:
                timer.stop()

        return result

    def _mark_resource(
        self,
        resource: Resource,
        work_configuration: WorkConfiguration,
        now: datetime,
        result: MarkResult,
    ) -> None:
        excluded, reason = self.exclusion_checker.is_excluded(resource, work_configuration.exclusions, now)
        if excluded:
            result.excluded += 1
            logger.debug(f"Excluding {resource.resource_id}: {reason}")
            return

        summaries = self.evaluate(resource)
        namespace = work_configuration.namespace
        tracked = self.store.find(resource.resource_id, namespace)

        if tracked is not None and not summaries and not work_configuration.dry_run:
            logger.info(f"Forgetting now valid resource {resource.resource_id} in {namespace}")
            self.store.remove(tracked)
            result.unmarked += 1
            self._publish(EventType.UNMARK, tracked, work_configuration)

        elif summaries and tracked is None:
            marked_resource = MarkedResource(
                resource=resource,
                summaries=summaries,
                namespace=namespace,
                resource_owner=self._resolve_owner(resource, work_configuration),
                projected_deletion_stamp=days_from_now(work_configuration.retention_days, now),
                created_at=now,
            )
            result.candidates += 1
            self.metrics.increment(
                CANDIDATES_COUNT,
                {"resourceType": work_configuration.resource_type, "configuration": namespace},
            )
            if not work_configuration.dry_run:
                self.store.upsert(marked_resource)
                result.marked += 1
                logger.info(f"Marking resource {resource.resource_id} in {namespace} for deletion")
                self._publish(EventType.MARK, marked_resource, work_configuration)

    def clean(
        self,
        marked_resource: MarkedResource,
        work_configuration: WorkConfiguration,
        post_clean: Optional[Callable[[], None]] = None,
    ) -> CleanOutcome:
        """Delete a marked resource if it is still in violation and deletion is authorized.

        Both exclusions and rules are re-evaluated against the current
        upstream snapshot, never the snapshot recorded at mark time.

        Args:
            marked_resource: Tracked entry to process
            work_configuration: Configuration of the entry's namespace
            post_clean: Invoked after processing whether it succeeded or not

        Returns:
            CleanOutcome describing what happened
        """
        outcome = CleanOutcome.FAILED
        try:
            outcome = self._clean(marked_resource, work_configuration)
        except Exception as e:
            logger.exception(f"Failed to clean up resource {marked_resource.resource_id}: {e}")
        finally:
            try:
                if post_clean is not None:
                    post_clean()
            finally:
                self.metrics.increment(
                    CLEAN_OUTCOMES, {"outcome": outcome.value, "configuration": work_configuration.namespace}
                )
        return outcome

    def _clean(self, marked_resource: MarkedResource, work_configuration: WorkConfiguration) -> CleanOutcome:
        dry_run = work_configuration.dry_run
        resource = self.get_upstream_resource(marked_resource, work_configuration)

        if resource is None:
            logger.info(f"Resource {marked_resource.resource_id} no longer exists")
            if not dry_run:
                self.store.remove(marked_resource)
            return CleanOutcome.VANISHED

        excluded, reason = self.exclusion_checker.is_excluded(resource, work_configuration.exclusions, self.clock())
        if excluded:
            logger.info(f"Skipping excluded resource {marked_resource.resource_id}: {reason}")
            return CleanOutcome.EXCLUDED

        summaries = self.evaluate(resource)
        if not summaries and not dry_run:
            logger.info(f"Resource {marked_resource.resource_id} is now compliant, unmarking")
            self._publish(EventType.UNMARK, marked_resource, work_configuration)
            self.store.remove(marked_resource)
            return CleanOutcome.UNMARKED

        logger.info(f"Preparing deletion of {marked_resource.resource_id}. dryRun {dry_run}")
        if dry_run:
            return CleanOutcome.DRY_RUN

        # Only presence of the adjusted stamp is checked, not whether it has passed.
        if marked_resource.adjusted_deletion_stamp is None:
            logger.debug(f"Resource {marked_resource.resource_id} awaits notification before deletion")
            return CleanOutcome.WAITING

        self.delete_resource(marked_resource, work_configuration)
        self.store.remove(marked_resource)
        self._publish(EventType.DELETE, marked_resource, work_configuration)
        logger.info(f"Deleted {marked_resource.resource_type} {marked_resource.resource_id}")
        return CleanOutcome.DELETED

    def evaluate(self, resource: Resource) -> List[ViolationSummary]:
        """Apply every rule and collect all violations, not just the first."""
        summaries = []
        for rule in self.rules:
            summary = rule.apply(resource)
            if summary is not None:
                summaries.append(summary)
        return summaries

    def _resolve_owner(self, resource: Resource, work_configuration: WorkConfiguration) -> str:
        return self.owner_resolver.resolve(resource) or work_configuration.owner_fallback or ""

    def _publish(self, event_type: EventType, marked_resource: MarkedResource, work_configuration: WorkConfiguration) -> None:
        self.event_bus.publish(ResourceEvent(event_type, marked_resource, work_configuration, timestamp=self.clock()))
