"""Tests for tracking store implementations.

Both stores share the same contract; YAML-specific behaviour is tested
separately.
"""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from sweeper.store.base import ResourceTrackingStore
from sweeper.store.memory import InMemoryTrackingStore
from sweeper.store.yaml_store import YamlTrackingStore
from tests.fixtures.resources import create_marked_resource, create_resource


@pytest.fixture(params=["memory", "yaml"])
def store(request, tmp_path: Path) -> ResourceTrackingStore:
    if request.param == "memory":
        return InMemoryTrackingStore()
    return YamlTrackingStore(str(tmp_path / "tracking"))


class TestTrackingStoreContract:
    """Test suite shared by every ResourceTrackingStore."""

    def test_find_missing_returns_none(self, store: ResourceTrackingStore) -> None:
        assert store.find("ami-missing", "aws:test:us-east-1:image") is None

    def test_upsert_then_find(self, store: ResourceTrackingStore) -> None:
        marked = create_marked_resource(create_resource("ami-1", unused_days=45))

        store.upsert(marked)
        found = store.find("ami-1", marked.namespace)

        assert found is not None
        assert found.resource_id == "ami-1"
        assert found.projected_deletion_stamp == marked.projected_deletion_stamp
        assert found.updated_at is not None

    def test_upsert_replaces_existing_entry(self, store: ResourceTrackingStore) -> None:
        """Test a second upsert with the same key replaces, never duplicates."""
        marked = create_marked_resource(create_resource("ami-1"))
        store.upsert(marked)

        marked.resource_owner = "new-owner@example.com"
        store.upsert(marked)

        assert len(store.list_marked()) == 1
        assert store.find("ami-1", marked.namespace).resource_owner == "new-owner@example.com"

    def test_same_resource_id_in_two_namespaces(self, store: ResourceTrackingStore) -> None:
        """Test the key is (resource_id, namespace), not resource_id alone."""
        store.upsert(create_marked_resource(create_resource("ami-1"), namespace="aws:a:us-east-1:image"))
        store.upsert(create_marked_resource(create_resource("ami-1"), namespace="aws:b:us-east-1:image"))

        assert len(store.list_marked()) == 2
        assert len(store.list_marked("aws:a:us-east-1:image")) == 1

    def test_remove(self, store: ResourceTrackingStore) -> None:
        marked = create_marked_resource()
        store.upsert(marked)

        assert store.remove(marked) is True
        assert store.find(marked.resource_id, marked.namespace) is None
        assert store.remove(marked) is False

    def test_list_clean_eligible(self, store: ResourceTrackingStore) -> None:
        """Test only entries with both stamps set are clean eligible."""
        store.upsert(create_marked_resource(create_resource("ami-new")))
        store.upsert(create_marked_resource(create_resource("ami-notified"), notified=True))
        store.upsert(create_marked_resource(create_resource("ami-ready"), notified=True, adjusted=True))

        assert [m.resource_id for m in store.list_clean_eligible()] == ["ami-ready"]

    def test_list_pending_notification(self, store: ResourceTrackingStore) -> None:
        store.upsert(create_marked_resource(create_resource("ami-new")))
        store.upsert(create_marked_resource(create_resource("ami-notified"), notified=True))

        assert [m.resource_id for m in store.list_pending_notification()] == ["ami-new"]

    def test_returned_entries_are_copies(self, store: ResourceTrackingStore) -> None:
        marked = create_marked_resource()
        store.upsert(marked)

        found = store.find(marked.resource_id, marked.namespace)
        found.resource_owner = "mutated"

        assert store.find(marked.resource_id, marked.namespace).resource_owner != "mutated"

    def test_concurrent_upserts_and_removes(self, store: ResourceTrackingStore) -> None:
        """Test concurrent writers across namespaces leave a consistent store."""
        errors: list = []

        def worker(index: int) -> None:
            try:
                namespace = f"aws:acct{index}:us-east-1:image"
                for n in range(10):
                    entry = create_marked_resource(create_resource(f"ami-{n}"), namespace=namespace)
                    store.upsert(entry)
                    if n % 2:
                        store.remove(entry)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.list_marked()) == 4 * 5


class TestYamlTrackingStore:
    """Test suite for YAML-specific persistence."""

    def test_entries_survive_a_new_instance(self, tmp_path: Path) -> None:
        """Test durability across process restarts."""
        marked = create_marked_resource(notified=True, adjusted=True)
        YamlTrackingStore(str(tmp_path)).upsert(marked)

        reopened = YamlTrackingStore(str(tmp_path))

        found = reopened.find(marked.resource_id, marked.namespace)
        assert found.is_clean_eligible is True
        assert found.summaries == marked.summaries

    def test_namespace_is_encoded_in_directory_name(self, tmp_path: Path) -> None:
        store = YamlTrackingStore(str(tmp_path))
        store.upsert(create_marked_resource(namespace="aws:test:us-east-1:image"))

        assert store.namespaces() == ["aws:test:us-east-1:image"]
        assert ":" not in [p.name for p in tmp_path.iterdir()][0]

    def test_path_traversal_ids_stay_inside_storage_dir(self, tmp_path: Path) -> None:
        store = YamlTrackingStore(str(tmp_path / "tracking"))
        store.upsert(create_marked_resource(create_resource("../../escape")))

        assert not (tmp_path / "escape.yaml").exists()
        assert store.find("../../escape", "aws:test:us-east-1:image") is not None

    def test_corrupt_entry_is_skipped(self, tmp_path: Path) -> None:
        store = YamlTrackingStore(str(tmp_path))
        marked = create_marked_resource(create_resource("ami-good"))
        store.upsert(marked)
        namespace_dir = next(tmp_path.iterdir())
        (namespace_dir / "ami-bad.yaml").write_text("resource: {}\n")

        assert [m.resource_id for m in store.list_marked()] == ["ami-good"]

    def test_upsert_rejects_entry_without_summaries(self, tmp_path: Path) -> None:
        store = YamlTrackingStore(str(tmp_path))
        marked = create_marked_resource()
        marked.summaries = []

        with pytest.raises(ValueError):
            store.upsert(marked)
        assert store.list_marked() == []

    def test_temp_files_are_ignored(self, tmp_path: Path) -> None:
        store = YamlTrackingStore(str(tmp_path))
        store.upsert(create_marked_resource())
        namespace_dir = next(tmp_path.iterdir())
        (namespace_dir / ".tmp-abc.yaml").write_text("partial")

        assert len(store.list_marked()) == 1
