"""Notifier agent.

Informs owners of newly marked resources and authorizes their deletion by
setting the notification stamp and the adjusted deletion stamp.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta
from typing import Callable, Dict, List

from sweeper.agents.base import SweeperAgent
from sweeper.agents.health import HealthGate
from sweeper.config.work import WorkConfigurator
from sweeper.models.marked_resource import MarkedResource, NotificationInfo
from sweeper.notifications.base import NotificationType, Notifier
from sweeper.store.base import ResourceTrackingStore
from sweeper.utils.timestamps import to_iso, utcnow

logger = logging.getLogger(__name__)


class NotifierAgent(SweeperAgent):
    """Notifies each owner once about all of their pending marked resources.

    Dry-run namespaces are never notified. When a notification fails the
    entries stay pending and are retried on the next tick.
    """

    name = "notifier"

    def __init__(
        self,
        executor: Executor,
        health_gate: HealthGate,
        configurator: WorkConfigurator,
        store: ResourceTrackingStore,
        notifier: Notifier,
        notification_type: NotificationType = NotificationType.EMAIL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(executor, health_gate)
        self.configurator = configurator
        self.store = store
        self.notifier = notifier
        self.notification_type = notification_type
        self.clock = clock

    def tick(self) -> List[Future]:
        logger.info("Resource notifiers started...")
        by_owner: Dict[str, List[MarkedResource]] = {}
        for marked_resource in self.store.list_pending_notification():
            work_configuration = self.configurator.find(marked_resource.namespace)
            if work_configuration is None or work_configuration.dry_run:
                continue
            if not marked_resource.resource_owner:
                logger.warning(f"No owner resolved for {marked_resource.resource_id}, cannot notify")
                continue
            by_owner.setdefault(marked_resource.resource_owner, []).append(marked_resource)

        return [self.executor.submit(self.notify_owner, owner, entries) for owner, entries in by_owner.items()]

    def notify_owner(self, owner: str, marked_resources: List[MarkedResource]) -> int:
        """Send one notification for an owner and record it on each entry.

        Returns:
            Number of entries updated
        """
        recipients = [r.strip() for r in owner.split(",") if r.strip()]
        context = {
            "resourceOwner": owner,
            "resources": [
                {
                    "resourceId": m.resource_id,
                    "resourceType": m.resource_type,
                    "namespace": m.namespace,
                    "projectedDeletionStamp": to_iso(m.projected_deletion_stamp),
                    "violations": [s.description for s in m.summaries],
                }
                for m in marked_resources
            ],
        }

        try:
            self.notifier.notify(recipients, context, self.notification_type.value)
        except Exception as e:
            logger.error(f"Failed to notify {owner} about {len(marked_resources)} resource(s): {e}")
            return 0

        now = self.clock()
        updated = 0
        for marked_resource in marked_resources:
            try:
                if self._record_notification(marked_resource, owner, now):
                    updated += 1
            except Exception as e:
                logger.exception(
                    f"Failed to record notification of {owner} for {marked_resource.resource_id} "
                    f"in {marked_resource.namespace}: {e}"
                )

        logger.info(f"Notified {owner} about {updated} resource(s)")
        return updated

    def _record_notification(self, marked_resource: MarkedResource, owner: str, now: datetime) -> bool:
        current = self.store.find(marked_resource.resource_id, marked_resource.namespace)
        if current is None or current.is_notified:
            return False
        work_configuration = self.configurator.find(current.namespace)
        grace = timedelta(days=work_configuration.notification_grace_days if work_configuration else 0)

        current.notification_info = NotificationInfo(
            recipient=owner,
            notification_type=self.notification_type.value,
            notification_stamp=now,
        )
        current.adjusted_deletion_stamp = max(current.projected_deletion_stamp, now + grace)
        self.store.upsert(current)
        return True
