"""Marked resource model.

The persisted tracking entity for a resource found in violation of policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary
from sweeper.utils.timestamps import from_iso, to_iso, utcnow


@dataclass
class NotificationInfo:
    """Owner notification state.

    Attributes:
        recipient: Who was notified (optional)
        notification_type: Channel used, e.g. "EMAIL" (optional)
        notification_stamp: When the owner was informed; None means not yet notified
    """

    recipient: Optional[str] = None
    notification_type: Optional[str] = None
    notification_stamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "notification_type": self.notification_type,
            "notification_stamp": to_iso(self.notification_stamp),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NotificationInfo":
        data = data or {}
        return cls(
            recipient=data.get("recipient"),
            notification_type=data.get("notification_type"),
            notification_stamp=from_iso(data.get("notification_stamp")),
        )


@dataclass
class MarkedResource:
    """Marked resource entity.

    Exactly one MarkedResource exists per (resource_id, namespace). The
    projected deletion stamp is fixed at creation; the notification stamp and
    adjusted deletion stamp are written only by the notification step and are
    read by the clean phase as eligibility gates.

    State transitions:
        absent → marked → notified → deleted
        marked/notified → unmarked (resource became compliant or vanished)

    Attributes:
        resource: Last-seen upstream snapshot
        summaries: Violations found at mark time (non-empty while tracked)
        namespace: Owning work configuration namespace
        resource_owner: Resolved owner (comma-separated recipients allowed)
        projected_deletion_stamp: Mark time + retention days
        notification_info: Owner notification state
        adjusted_deletion_stamp: Deletion authorization stamp (optional)
        created_at: When tracking started
        updated_at: Last persistence time
    """

    resource: Resource
    summaries: List[ViolationSummary]
    namespace: str
    resource_owner: str
    projected_deletion_stamp: datetime
    notification_info: NotificationInfo = field(default_factory=NotificationInfo)
    adjusted_deletion_stamp: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    @property
    def resource_id(self) -> str:
        return self.resource.resource_id

    @property
    def resource_type(self) -> str:
        return self.resource.resource_type

    @property
    def cloud_provider(self) -> str:
        return self.resource.cloud_provider

    @property
    def key(self) -> Tuple[str, str]:
        """Tracking store key: (resource_id, namespace)."""
        return (self.resource_id, self.namespace)

    @property
    def is_notified(self) -> bool:
        return self.notification_info.notification_stamp is not None

    @property
    def is_clean_eligible(self) -> bool:
        """True once both the notification stamp and adjusted deletion stamp are set."""
        return self.is_notified and self.adjusted_deletion_stamp is not None

    def validate(self) -> bool:
        """Validate tracking invariants.

        Raises:
            ValueError: If any validation rule fails
        """
        if not self.summaries:
            raise ValueError("Marked resource must carry at least one violation summary")
        if not self.namespace:
            raise ValueError("namespace cannot be empty")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert marked resource to dictionary for serialization."""
        return {
            "resource": self.resource.to_dict(),
            "summaries": [s.to_dict() for s in self.summaries],
            "namespace": self.namespace,
            "resource_owner": self.resource_owner,
            "projected_deletion_stamp": to_iso(self.projected_deletion_stamp),
            "notification_info": self.notification_info.to_dict(),
            "adjusted_deletion_stamp": to_iso(self.adjusted_deletion_stamp),
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkedResource":
        """Create marked resource from dictionary."""
        return cls(
            resource=Resource.from_dict(data["resource"]),
            summaries=[ViolationSummary.from_dict(s) for s in data.get("summaries", [])],
            namespace=data["namespace"],
            resource_owner=data.get("resource_owner", ""),
            projected_deletion_stamp=from_iso(data["projected_deletion_stamp"]),
            notification_info=NotificationInfo.from_dict(data.get("notification_info")),
            adjusted_deletion_stamp=from_iso(data.get("adjusted_deletion_stamp")),
            created_at=from_iso(data.get("created_at")) or utcnow(),
            updated_at=from_iso(data.get("updated_at")),
        )
