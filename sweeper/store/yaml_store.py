"""File-backed tracking store.

Persists one YAML document per marked resource so independent namespaces never
contend on a shared file.

Storage structure:
    ~/.sweeper/tracking/
        aws%3Aprod%3Aus-east-1%3Aimage/
            ami-0abc.yaml
            ami-0def.yaml
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote, unquote

import yaml

from sweeper.models.marked_resource import MarkedResource
from sweeper.store.base import ResourceTrackingStore
from sweeper.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


def _encode(value: str) -> str:
    # "." and ".." would escape the directory layout
    encoded = quote(value, safe="-_")
    return encoded.replace(".", "%2E")


class YamlTrackingStore(ResourceTrackingStore):
    """YAML-per-entry tracking store.

    Writes go to a temporary file that atomically replaces the entry, so a
    reader sees either the old or the new document. Writers of the same key
    are serialized through a striped lock; different keys rarely share a
    stripe and never share a file.

    Attributes:
        storage_dir: Base directory for tracking documents
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize tracking store.

        Args:
            storage_dir: Base directory (default: ~/.sweeper/tracking)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".sweeper" / "tracking")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self._stripes = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def _path(self, resource_id: str, namespace: str) -> Path:
        return self.storage_dir / _encode(namespace) / f"{_encode(resource_id)}.yaml"

    def _stripe(self, key: Tuple[str, str]) -> threading.Lock:
        return self._stripes[hash(key) % LOCK_STRIPES]

    def find(self, resource_id: str, namespace: str) -> Optional[MarkedResource]:
        return self._load(self._path(resource_id, namespace))

    def upsert(self, marked_resource: MarkedResource) -> None:
        marked_resource.validate()
        marked_resource.updated_at = utcnow()
        path = self._path(marked_resource.resource_id, marked_resource.namespace)

        with self._stripe(marked_resource.key):
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".yaml")
            try:
                with os.fdopen(fd, "w") as f:
                    yaml.safe_dump(marked_resource.to_dict(), f, default_flow_style=False, sort_keys=False)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

        logger.debug(f"Upserted {marked_resource.resource_id} in {marked_resource.namespace}")

    def remove(self, marked_resource: MarkedResource) -> bool:
        path = self._path(marked_resource.resource_id, marked_resource.namespace)
        with self._stripe(marked_resource.key):
            try:
                path.unlink()
            except FileNotFoundError:
                return False
        logger.debug(f"Removed {marked_resource.resource_id} from {marked_resource.namespace}")
        return True

    def list_marked(self, namespace: Optional[str] = None) -> List[MarkedResource]:
        if namespace is not None:
            directories = [self.storage_dir / _encode(namespace)]
        else:
            directories = [d for d in sorted(self.storage_dir.iterdir()) if d.is_dir()]

        results = []
        for directory in directories:
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob("*.yaml")):
                if path.name.startswith(".tmp-"):
                    continue
                entry = self._load(path)
                if entry is not None:
                    results.append(entry)
        return results

    def namespaces(self) -> List[str]:
        """Namespaces that currently have a directory in the store."""
        return [unquote(d.name) for d in sorted(self.storage_dir.iterdir()) if d.is_dir()]

    def _load(self, path: Path) -> Optional[MarkedResource]:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            return None

        try:
            return MarkedResource.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable tracking entry {path}: {e}")
            return None
