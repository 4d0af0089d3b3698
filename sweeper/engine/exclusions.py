"""Exclusion evaluation.

Decides whether a resource is entirely out of scope regardless of rules.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sweeper.models.exclusion import Exclusion, ExclusionType
from sweeper.models.resource import Resource


class ExclusionChecker:
    """Exclusion checker for resource scope evaluation.

    Combines process-wide exclusions with the exclusions configured on a
    namespace and evaluates them in priority order.

    Attributes:
        exclusions: Process-wide exclusions sorted by priority
    """

    def __init__(self, exclusions: Optional[list[Exclusion]] = None) -> None:
        """Initialize exclusion checker.

        Args:
            exclusions: Exclusions applied to every namespace (optional)
        """
        self.exclusions = sorted(exclusions or [], key=lambda e: e.priority)

    def is_excluded(
        self,
        resource: Resource,
        namespace_exclusions: Iterable[Exclusion] = (),
        now: Optional[datetime] = None,
    ) -> tuple[bool, Optional[str]]:
        """Check if a resource is excluded by any exclusion.

        Returns on the first matching exclusion (highest priority wins).

        Args:
            resource: Resource to evaluate
            namespace_exclusions: Exclusions configured on the work configuration
            now: Reference time for age exclusions (optional)

        Returns:
            Tuple of (is_excluded, reason)
        """
        for exclusion in self._ordered(namespace_exclusions):
            if exclusion.matches(resource, now):
                return True, self._get_exclusion_reason(exclusion, resource)

        return False, None

    def check_all_exclusions(
        self,
        resource: Resource,
        namespace_exclusions: Iterable[Exclusion] = (),
        now: Optional[datetime] = None,
    ) -> list[Exclusion]:
        """Return ALL exclusions matching a resource, not just the first."""
        return [e for e in self._ordered(namespace_exclusions) if e.matches(resource, now)]

    def _ordered(self, namespace_exclusions: Iterable[Exclusion]) -> list[Exclusion]:
        return sorted([*self.exclusions, *namespace_exclusions], key=lambda e: e.priority)

    def _get_exclusion_reason(self, exclusion: Exclusion, resource: Resource) -> str:
        if exclusion.description:
            return f"{exclusion.description} (exclusion: {exclusion.exclusion_id})"

        if exclusion.exclusion_type == ExclusionType.TAG:
            tag_key = exclusion.patterns.get("tag_key", "")
            return f"Tag {tag_key}={resource.tags.get(tag_key, '')} (exclusion: {exclusion.exclusion_id})"
        elif exclusion.exclusion_type == ExclusionType.ALLOWLIST:
            return f"Resource {resource.resource_id} is allowlisted (exclusion: {exclusion.exclusion_id})"
        elif exclusion.exclusion_type == ExclusionType.NAME:
            return f"Name {resource.name or resource.resource_id} matches pattern (exclusion: {exclusion.exclusion_id})"
        elif exclusion.exclusion_type == ExclusionType.AGE:
            return f"Resource younger than {exclusion.threshold_value} days (exclusion: {exclusion.exclusion_id})"

        return f"Excluded by {exclusion.exclusion_id}"
