"""Single-process lock manager."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple
from uuid import uuid4

from sweeper.locks.base import DEFAULT_LOCK_TTL_SECONDS, LockManager
from sweeper.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


class InMemoryLockManager(LockManager):
    """Lock manager for workers sharing one process.

    Locks are not reentrant: re-acquiring a key already held by this
    instance fails until the TTL elapses or the key is released.
    """

    def __init__(self, instance_id: Optional[str] = None, clock: Callable[[], datetime] = utcnow) -> None:
        self.instance_id = instance_id or str(uuid4())
        self.clock = clock
        self._lock = threading.Lock()
        self._locks: Dict[str, Tuple[str, datetime]] = {}

    def acquire(self, key: str, ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS) -> bool:
        now = self.clock()
        with self._lock:
            held = self._locks.get(key)
            if held is not None and held[1] > now:
                logger.debug(f"Lock already held for {key}")
                return False
            self._locks[key] = (self.instance_id, now + timedelta(seconds=ttl_seconds))
        logger.debug(f"Acquired lock {key} for {ttl_seconds}s")
        return True

    def release(self, key: str) -> bool:
        with self._lock:
            return self._locks.pop(key, None) is not None

    def is_locked(self, key: str) -> bool:
        now = self.clock()
        with self._lock:
            held = self._locks.get(key)
            return held is not None and held[1] > now
