"""Resource tracking store.

Durable map keyed by (resource_id, namespace) holding currently marked resources.
"""

from __future__ import annotations

from sweeper.store.base import ResourceTrackingStore
from sweeper.store.memory import InMemoryTrackingStore
from sweeper.store.yaml_store import YamlTrackingStore

__all__ = ["InMemoryTrackingStore", "ResourceTrackingStore", "YamlTrackingStore"]
