"""Lifecycle event model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from sweeper.models.marked_resource import MarkedResource
from sweeper.models.work_configuration import WorkConfiguration
from sweeper.utils.timestamps import to_iso, utcnow


class EventType(Enum):
    """Lifecycle transition kinds."""

    MARK = "mark"
    UNMARK = "unmark"
    DELETE = "delete"


@dataclass
class ResourceEvent:
    """A lifecycle transition of one marked resource.

    Attributes:
        event_type: Transition kind
        marked_resource: Tracking entity the transition applies to
        work_configuration: Namespace configuration in effect
        timestamp: When the transition happened (UTC)
        event_id: Unique event identifier
    """

    event_type: EventType
    marked_resource: MarkedResource
    work_configuration: WorkConfiguration
    timestamp: datetime = field(default_factory=utcnow)
    event_id: str = field(default_factory=lambda: f"evt_{uuid.uuid4()}")

    @property
    def namespace(self) -> str:
        return self.work_configuration.namespace

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "timestamp": to_iso(self.timestamp),
            "namespace": self.namespace,
            "dry_run": self.work_configuration.dry_run,
            "marked_resource": self.marked_resource.to_dict(),
        }
