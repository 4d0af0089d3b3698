"""In-process tracking store."""

from __future__ import annotations

import copy
import threading
from typing import Dict, List, Optional, Tuple

from sweeper.models.marked_resource import MarkedResource
from sweeper.store.base import ResourceTrackingStore
from sweeper.utils.timestamps import utcnow


class InMemoryTrackingStore(ResourceTrackingStore):
    """Dictionary-backed store for single-process deployments and tests.

    Entries are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[Tuple[str, str], MarkedResource] = {}

    def find(self, resource_id: str, namespace: str) -> Optional[MarkedResource]:
        with self._lock:
            entry = self._entries.get((resource_id, namespace))
            return copy.deepcopy(entry) if entry is not None else None

    def upsert(self, marked_resource: MarkedResource) -> None:
        marked_resource.updated_at = utcnow()
        with self._lock:
            self._entries[marked_resource.key] = copy.deepcopy(marked_resource)

    def remove(self, marked_resource: MarkedResource) -> bool:
        with self._lock:
            return self._entries.pop(marked_resource.key, None) is not None

    def list_marked(self, namespace: Optional[str] = None) -> List[MarkedResource]:
        with self._lock:
            entries = [e for e in self._entries.values() if namespace is None or e.namespace == namespace]
            return copy.deepcopy(entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
