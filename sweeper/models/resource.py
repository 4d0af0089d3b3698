"""Upstream resource model representing one scanned cloud resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from sweeper.utils.timestamps import ensure_utc, from_iso, to_iso


@dataclass
class Resource:
    """Point-in-time snapshot of a resource as reported by its provider.

    Resources are fetched fresh on every scan and are never mutated by the
    lifecycle engine.

    Attributes:
        resource_id: Provider identifier, unique within a namespace (e.g., "ami-0abc")
        resource_type: Resource type (e.g., "image")
        cloud_provider: Provider name (e.g., "aws")
        name: Human-readable name (optional)
        created_at: Creation timestamp reported by the provider (optional)
        tags: Resource tags
        details: Arbitrary provider-specific attributes
    """

    resource_id: str
    resource_type: str
    cloud_provider: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    tags: Dict[str, str] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.resource_id:
            raise ValueError("resource_id cannot be empty")
        if self.created_at is not None:
            self.created_at = ensure_utc(self.created_at)

    def age_days(self, now: datetime) -> Optional[float]:
        """Return the resource age in days, or None when creation time is unknown."""
        if self.created_at is None:
            return None
        return (ensure_utc(now) - self.created_at).total_seconds() / 86400

    def to_dict(self) -> Dict[str, Any]:
        """Convert resource to dictionary for serialization."""
        return {
            "resource_id": self.resource_id,
            "resource_type": self.resource_type,
            "cloud_provider": self.cloud_provider,
            "name": self.name,
            "created_at": to_iso(self.created_at),
            "tags": dict(self.tags),
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        """Create resource from dictionary."""
        return cls(
            resource_id=data["resource_id"],
            resource_type=data["resource_type"],
            cloud_provider=data["cloud_provider"],
            name=data.get("name"),
            created_at=from_iso(data.get("created_at")),
            tags=data.get("tags") or {},
            details=data.get("details") or {},
        )
