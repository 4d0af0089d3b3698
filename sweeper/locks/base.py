"""Lock manager interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

DEFAULT_LOCK_TTL_SECONDS = 3600


def clean_lock_key(namespace: str) -> str:
    """Lock key guarding the clean pass of one namespace."""
    return f"{{sweeper:clean}}:{namespace}"


class LockManager(ABC):
    """Non-blocking, TTL-bounded exclusive locks keyed by string.

    Callers never need to release: a lock held by a crashed worker expires
    after its TTL.
    """

    @abstractmethod
    def acquire(self, key: str, ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS) -> bool:
        """Try to take the lock.

        Args:
            key: Lock name
            ttl_seconds: Seconds until the lock expires on its own

        Returns:
            True if acquired, False immediately if another owner holds it
        """
        pass

    @abstractmethod
    def release(self, key: str) -> bool:
        """Release the lock if held by this manager."""
        pass

    @abstractmethod
    def is_locked(self, key: str) -> bool:
        """True if any owner holds an unexpired lock on key."""
        pass
