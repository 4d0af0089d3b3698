"""SQLite-backed lock manager.

Lets several sweeper processes on one host (or sharing one database file)
divide clean passes between them. INSERT OR IGNORE gives O(1) conflict
detection; expired rows are purged inside the same transaction so a crashed
holder never blocks a namespace for longer than its TTL.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional
from uuid import uuid4

from sweeper.locks.base import DEFAULT_LOCK_TTL_SECONDS, LockManager
from sweeper.utils.timestamps import ensure_utc, utcnow

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sweeper_locks (
    lock_key TEXT PRIMARY KEY,
    locked_by TEXT NOT NULL,
    locked_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
)
"""


def _stamp(value: datetime) -> str:
    return ensure_utc(value).isoformat(timespec="microseconds")


class SqliteLockManager(LockManager):
    """Database-backed TTL locks.

    Example:
        >>> manager = SqliteLockManager("/var/lib/sweeper/locks.db", instance_id="worker-1")
        >>> if manager.acquire("{sweeper:clean}:aws:prod:us-east-1:image", ttl_seconds=3600):
        ...     pass  # this worker owns the namespace until the TTL elapses
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        instance_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize lock manager.

        Args:
            db_path: SQLite database file (default: ~/.sweeper/locks.db)
            instance_id: Unique identifier for this worker, auto-generated if not provided
            clock: Source of current UTC time
        """
        if db_path is None:
            db_path = str(Path.home() / ".sweeper" / "locks.db")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.instance_id = instance_id or str(uuid4())
        self.clock = clock

        with closing(self._connect()) as conn:
            conn.execute(SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=30.0, isolation_level=None)

    def acquire(self, key: str, ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS) -> bool:
        now = self.clock()
        expires = now + timedelta(seconds=ttl_seconds)

        try:
            with closing(self._connect()) as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    conn.execute(
                        "DELETE FROM sweeper_locks WHERE lock_key = ? AND expires_at <= ?",
                        (key, _stamp(now)),
                    )
                    cursor = conn.execute(
                        "INSERT OR IGNORE INTO sweeper_locks (lock_key, locked_by, locked_at, expires_at) "
                        "VALUES (?, ?, ?, ?)",
                        (key, self.instance_id, _stamp(now), _stamp(expires)),
                    )
                    acquired = cursor.rowcount > 0
                    conn.execute("COMMIT")
                except sqlite3.Error:
                    conn.execute("ROLLBACK")
                    raise
        except sqlite3.Error as e:
            logger.error(f"Lock acquire failed for {key}: {e}")
            return False

        if acquired:
            logger.debug(f"Acquired lock {key} for {ttl_seconds}s")
            return True

        logger.debug(f"Lock already held for {key}")
        return False

    def release(self, key: str) -> bool:
        """Release a lock held by this instance."""
        try:
            with closing(self._connect()) as conn:
                released = conn.execute(
                    "DELETE FROM sweeper_locks WHERE lock_key = ? AND locked_by = ?",
                    (key, self.instance_id),
                ).rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Lock release failed for {key}: {e}")
            return False
        return released

    def is_locked(self, key: str) -> bool:
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT 1 FROM sweeper_locks WHERE lock_key = ? AND expires_at > ?",
                (key, _stamp(self.clock())),
            ).fetchone()
        return row is not None
