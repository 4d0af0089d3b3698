"""Tracking store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from sweeper.models.marked_resource import MarkedResource


class ResourceTrackingStore(ABC):
    """Durable (resource_id, namespace) → MarkedResource map.

    Implementations must tolerate concurrent upserts and removals across
    namespaces without a global lock; upsert replaces any existing entry with
    the same key.
    """

    @abstractmethod
    def find(self, resource_id: str, namespace: str) -> Optional[MarkedResource]:
        """Point lookup; None when the resource is not tracked."""
        pass

    @abstractmethod
    def upsert(self, marked_resource: MarkedResource) -> None:
        """Insert or replace the entry for marked_resource.key."""
        pass

    @abstractmethod
    def remove(self, marked_resource: MarkedResource) -> bool:
        """Remove the entry for marked_resource.key.

        Returns:
            True if an entry was removed, False if none existed
        """
        pass

    @abstractmethod
    def list_marked(self, namespace: Optional[str] = None) -> List[MarkedResource]:
        """All tracked entries, optionally restricted to one namespace."""
        pass

    def list_clean_eligible(self) -> List[MarkedResource]:
        """Entries whose notification stamp and adjusted deletion stamp are both set."""
        return [m for m in self.list_marked() if m.is_clean_eligible]

    def list_pending_notification(self) -> List[MarkedResource]:
        """Entries whose owner has not been notified yet."""
        return [m for m in self.list_marked() if not m.is_notified]
