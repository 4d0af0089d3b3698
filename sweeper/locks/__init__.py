"""Namespace-scoped mutual exclusion with TTL expiry."""

from __future__ import annotations

from sweeper.locks.base import LockManager, clean_lock_key
from sweeper.locks.memory import InMemoryLockManager
from sweeper.locks.sqlite import SqliteLockManager

__all__ = ["InMemoryLockManager", "LockManager", "SqliteLockManager", "clean_lock_key"]
