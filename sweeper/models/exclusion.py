"""Exclusion model.

Configured override that removes resources from consideration entirely,
independent of rule outcomes.
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sweeper.models.resource import Resource
from sweeper.utils.timestamps import utcnow


class ExclusionType(Enum):
    """Exclusion type enumeration."""

    TAG = "tag"
    ALLOWLIST = "allowlist"
    NAME = "name"
    AGE = "age"


@dataclass
class Exclusion:
    """Exclusion entity.

    Type-specific patterns:
        - tag: {"tag_key": "Protected", "tag_values": ["true"]} (empty
          tag_values matches any value of the key)
        - allowlist: {"resource_ids": ["ami-123"], "names": ["golden-image"]}
        - name: {"name_patterns": ["base-*", "*-golden"]} (shell-style globs)
        - age: {} with threshold_value = minimum age in days; younger
          resources are excluded

    Attributes:
        exclusion_id: Unique identifier for the exclusion
        exclusion_type: Kind of exclusion (tag, allowlist, name, age)
        enabled: Whether the exclusion is active
        priority: Evaluation order (1=highest, 100=lowest)
        patterns: Type-specific match patterns
        threshold_value: Numeric threshold for age exclusions (optional)
        description: Human-readable description (optional)
    """

    exclusion_id: str
    exclusion_type: ExclusionType
    enabled: bool = True
    priority: int = 50
    patterns: Dict[str, Any] = field(default_factory=dict)
    threshold_value: Optional[float] = None
    description: Optional[str] = None

    def validate(self) -> bool:
        """Validate exclusion configuration.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if not 1 <= self.priority <= 100:
            raise ValueError("Priority must be 1-100")

        if self.exclusion_type == ExclusionType.AGE:
            if self.threshold_value is None or self.threshold_value <= 0:
                raise ValueError("age exclusion requires positive threshold")
        elif not self.patterns:
            raise ValueError("Patterns cannot be empty")

        return True

    def matches(self, resource: Resource, now: Optional[datetime] = None) -> bool:
        """Check whether this exclusion applies to a resource.

        Args:
            resource: Resource to evaluate
            now: Reference time for age exclusions (default: current UTC time)

        Returns:
            True if the resource is excluded by this entry
        """
        if not self.enabled:
            return False

        if self.exclusion_type == ExclusionType.TAG:
            return self._matches_tag(resource)
        if self.exclusion_type == ExclusionType.ALLOWLIST:
            return self._matches_allowlist(resource)
        if self.exclusion_type == ExclusionType.NAME:
            return self._matches_name(resource)
        if self.exclusion_type == ExclusionType.AGE:
            return self._matches_age(resource, now or utcnow())

        return False

    def _matches_tag(self, resource: Resource) -> bool:
        tag_key = self.patterns.get("tag_key")
        if not tag_key or tag_key not in resource.tags:
            return False

        tag_values = self.patterns.get("tag_values") or []
        if not tag_values:
            return True
        return resource.tags[tag_key] in tag_values

    def _matches_allowlist(self, resource: Resource) -> bool:
        if resource.resource_id in (self.patterns.get("resource_ids") or []):
            return True
        return resource.name is not None and resource.name in (self.patterns.get("names") or [])

    def _matches_name(self, resource: Resource) -> bool:
        candidate = resource.name or resource.resource_id
        return any(fnmatch.fnmatchcase(candidate, pattern) for pattern in self.patterns.get("name_patterns") or [])

    def _matches_age(self, resource: Resource, now: datetime) -> bool:
        age = resource.age_days(now)
        if age is None or self.threshold_value is None:
            return False
        return age < self.threshold_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exclusion_id": self.exclusion_id,
            "exclusion_type": self.exclusion_type.value,
            "enabled": self.enabled,
            "priority": self.priority,
            "patterns": dict(self.patterns),
            "threshold_value": self.threshold_value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exclusion":
        """Create exclusion from dictionary.

        Raises:
            ValueError: If the exclusion type is unknown
        """
        return cls(
            exclusion_id=data["exclusion_id"],
            exclusion_type=ExclusionType(data["exclusion_type"]),
            enabled=data.get("enabled", True),
            priority=data.get("priority", 50),
            patterns=data.get("patterns") or {},
            threshold_value=data.get("threshold_value"),
            description=data.get("description"),
        )
