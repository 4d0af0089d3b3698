"""Audit storage for lifecycle events.

Stores and retrieves audit logs in YAML format for compliance and troubleshooting.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from sweeper.events.bus import EventBus
from sweeper.events.models import EventType, ResourceEvent
from sweeper.utils.timestamps import ensure_utc, from_iso, to_iso, utcnow

logger = logging.getLogger(__name__)


class AuditStorage:
    """Audit log storage and retrieval.

    Stores one YAML file per lifecycle event, organized by year/month.
    Supports querying events by date range and event type.

    Storage structure:
        ~/.sweeper/audit-logs/
            2026/
                10/
                    event-evt_123.yaml
                    event-evt_456.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.sweeper/audit-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".sweeper" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_event(self, event: ResourceEvent) -> Path:
        """Write a lifecycle event to audit storage.

        Args:
            event: Event to log

        Returns:
            Path of the written audit file
        """
        timestamp = ensure_utc(event.timestamp)
        year_month_dir = self.storage_dir / str(timestamp.year) / f"{timestamp.month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "resource_lifecycle",
                "created_at": to_iso(utcnow()),
            },
            "event": event.to_dict(),
        }

        audit_file = year_month_dir / f"event-{event.event_id}.yaml"
        with open(audit_file, "w") as f:
            yaml.safe_dump(audit_data, f, default_flow_style=False, sort_keys=False)
        return audit_file

    def get_event(self, event_id: str) -> Optional[dict]:
        """Retrieve an event audit log by ID."""
        for audit_file in self.storage_dir.glob(f"*/*/event-{event_id}.yaml"):
            with open(audit_file, "r") as f:
                return yaml.safe_load(f)
        return None

    def query_events(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        event_type: Optional[EventType] = None,
    ) -> list[dict]:
        """Query events within a date range.

        Args:
            since: Start time (inclusive), None for all
            until: End time (inclusive), None for all
            event_type: Restrict to one event kind (optional)

        Returns:
            List of audit logs sorted by event timestamp
        """
        results = []

        for audit_file in self.storage_dir.glob("*/*/event-*.yaml"):
            with open(audit_file, "r") as f:
                audit_data = yaml.safe_load(f)

            event = audit_data["event"]
            timestamp = from_iso(event["timestamp"])

            if since and timestamp < ensure_utc(since):
                continue
            if until and timestamp > ensure_utc(until):
                continue
            if event_type and event["event_type"] != event_type.value:
                continue

            results.append(audit_data)

        return sorted(results, key=lambda d: from_iso(d["event"]["timestamp"]))


class AuditListener:
    """Event bus subscriber persisting every lifecycle event to AuditStorage."""

    def __init__(self, storage: AuditStorage) -> None:
        self.storage = storage

    def attach(self, bus: EventBus) -> str:
        return bus.subscribe(self)

    def __call__(self, event: ResourceEvent) -> None:
        path = self.storage.log_event(event)
        logger.debug(f"Audited {event.event_type.value} of {event.marked_resource.resource_id} to {path}")
