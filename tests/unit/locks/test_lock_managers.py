"""Tests for TTL lock managers."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, List

import pytest

from sweeper.locks.base import LockManager, clean_lock_key
from sweeper.locks.memory import InMemoryLockManager
from sweeper.locks.sqlite import SqliteLockManager
from tests.fixtures.resources import FixedClock

KEY = clean_lock_key("aws:test:us-east-1:image")


@pytest.fixture(params=["memory", "sqlite"])
def manager_factory(request, tmp_path: Path) -> Callable[..., LockManager]:
    """Factory creating managers that share one backing lock space."""
    shared = InMemoryLockManager()
    db_path = str(tmp_path / "locks.db")

    def factory(instance_id: str, clock=None) -> LockManager:
        if request.param == "memory":
            shared.instance_id = instance_id
            if clock is not None:
                shared.clock = clock
            return shared
        if clock is not None:
            return SqliteLockManager(db_path, instance_id=instance_id, clock=clock)
        return SqliteLockManager(db_path, instance_id=instance_id)

    return factory


def test_clean_lock_key_format() -> None:
    assert clean_lock_key("aws:test:us-east-1:image") == "{sweeper:clean}:aws:test:us-east-1:image"


class TestLockManagers:
    """Test suite shared by lock manager implementations."""

    def test_acquire_free_lock(self, manager_factory) -> None:
        manager = manager_factory("worker-1")

        assert manager.acquire(KEY, ttl_seconds=60) is True
        assert manager.is_locked(KEY) is True

    def test_second_acquire_is_rejected(self, manager_factory) -> None:
        """Test a held lock is not handed out twice, even to the same worker."""
        first = manager_factory("worker-1")
        assert first.acquire(KEY, ttl_seconds=60) is True

        second = manager_factory("worker-2")
        assert second.acquire(KEY, ttl_seconds=60) is False

    def test_independent_keys(self, manager_factory) -> None:
        manager = manager_factory("worker-1")

        assert manager.acquire(clean_lock_key("aws:a:us-east-1:image")) is True
        assert manager.acquire(clean_lock_key("aws:b:us-east-1:image")) is True

    def test_lock_expires_after_ttl(self, manager_factory) -> None:
        """Test a crashed holder blocks the key only until its TTL elapses."""
        clock = FixedClock()
        holder = manager_factory("crashed", clock=clock)
        assert holder.acquire(KEY, ttl_seconds=3600) is True

        clock.advance(seconds=3599)
        assert manager_factory("worker-2", clock=clock).acquire(KEY, ttl_seconds=3600) is False

        clock.advance(seconds=2)
        assert manager_factory("worker-3", clock=clock).acquire(KEY, ttl_seconds=3600) is True

    def test_release(self, manager_factory) -> None:
        manager = manager_factory("worker-1")
        manager.acquire(KEY)

        assert manager.release(KEY) is True
        assert manager.is_locked(KEY) is False
        assert manager.acquire(KEY) is True

    def test_concurrent_acquire_has_single_winner(self, manager_factory) -> None:
        """Test at most one of many concurrent contenders wins."""
        managers = [manager_factory(f"worker-{i}") for i in range(8)]
        barrier = threading.Barrier(len(managers))
        results: List[bool] = []
        results_lock = threading.Lock()

        def contend(manager: LockManager) -> None:
            barrier.wait()
            acquired = manager.acquire(KEY, ttl_seconds=60)
            with results_lock:
                results.append(acquired)

        threads = [threading.Thread(target=contend, args=(m,)) for m in managers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1


class TestSqliteLockManager:
    """Test suite for SQLite-specific behaviour."""

    def test_release_only_by_holder(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "locks.db")
        holder = SqliteLockManager(db_path, instance_id="holder")
        other = SqliteLockManager(db_path, instance_id="other")
        holder.acquire(KEY)

        assert other.release(KEY) is False
        assert holder.is_locked(KEY) is True

    def test_default_path_created(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))

        manager = SqliteLockManager()

        assert Path(manager.db_path) == tmp_path / ".sweeper" / "locks.db"
        assert Path(manager.db_path).exists()
