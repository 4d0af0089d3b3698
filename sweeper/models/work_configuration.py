"""Work configuration model.

One namespace scope: a resource type for one provider, account and region.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sweeper.models.exclusion import Exclusion


@dataclass
class WorkConfiguration:
    """Work configuration entity.

    The namespace derived from these fields uniquely identifies one unit of
    scheduling, locking, and configuration.

    Attributes:
        resource_type: Resource type handled in this scope (e.g., "image")
        cloud_provider: Provider name (e.g., "aws")
        account_id: Provider account identifier
        account_name: Human-friendly account name used in the namespace
        region: Region or location
        retention_days: Grace period between mark and projected deletion
        dry_run: Compute decisions without persisting or acting on them
        exclusions: Ordered exclusion entries for this namespace
        notification_grace_days: Minimum days between notification and deletion
        owner_fallback: Owner used when no owner can be resolved (optional)
    """

    resource_type: str
    cloud_provider: str
    account_id: str
    region: str
    account_name: Optional[str] = None
    retention_days: int = 14
    dry_run: bool = True
    exclusions: List[Exclusion] = field(default_factory=list)
    notification_grace_days: int = 2
    owner_fallback: Optional[str] = None

    @property
    def namespace(self) -> str:
        """Stable scope string: provider:account:region:resource_type."""
        account = self.account_name or self.account_id
        return ":".join([self.cloud_provider, account, self.region, self.resource_type]).lower()

    def validate(self) -> bool:
        """Validate work configuration.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        for field_name in ("resource_type", "cloud_provider", "account_id", "region"):
            value = getattr(self, field_name)
            if not value:
                raise ValueError(f"{field_name} cannot be empty")
            if not re.match(r"^[A-Za-z0-9_.\-]+$", str(value)):
                raise ValueError(f"Invalid {field_name}: {value}")

        if self.account_name is not None and not re.match(r"^[A-Za-z0-9_.\-]+$", self.account_name):
            raise ValueError(f"Invalid account_name: {self.account_name}")

        if self.retention_days < 0:
            raise ValueError("retention_days cannot be negative")
        if self.notification_grace_days < 0:
            raise ValueError("notification_grace_days cannot be negative")

        for exclusion in self.exclusions:
            exclusion.validate()

        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_type": self.resource_type,
            "cloud_provider": self.cloud_provider,
            "account_id": self.account_id,
            "account_name": self.account_name,
            "region": self.region,
            "retention_days": self.retention_days,
            "dry_run": self.dry_run,
            "exclusions": [e.to_dict() for e in self.exclusions],
            "notification_grace_days": self.notification_grace_days,
            "owner_fallback": self.owner_fallback,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkConfiguration":
        """Create work configuration from dictionary."""
        return cls(
            resource_type=data["resource_type"],
            cloud_provider=data["cloud_provider"],
            account_id=str(data["account_id"]),
            account_name=data.get("account_name"),
            region=data["region"],
            retention_days=int(data.get("retention_days", 14)),
            dry_run=bool(data.get("dry_run", True)),
            exclusions=[Exclusion.from_dict(e) for e in data.get("exclusions") or []],
            notification_grace_days=int(data.get("notification_grace_days", 2)),
            owner_fallback=data.get("owner_fallback"),
        )
