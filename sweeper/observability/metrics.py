"""Metrics interface injected into the lifecycle engine.

Metric names used by the engine:
    sweeper.resources.candidates  counter, tags: resourceType, configuration
    sweeper.mark.duration         timer
    sweeper.clean.outcomes        counter, tags: outcome, configuration

Example:
    >>> metrics = InMemoryMetrics()
    >>> metrics.increment("sweeper.resources.candidates", {"resourceType": "image"})
    >>> with metrics.start_timer("sweeper.mark.duration"):
    ...     pass
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

TagKey = Tuple[str, Tuple[Tuple[str, str], ...]]


def _key(name: str, tags: Optional[Dict[str, str]]) -> TagKey:
    return name, tuple(sorted((tags or {}).items()))


class Timer:
    """Running timer; stop() reports elapsed seconds to its owner exactly once."""

    def __init__(self, metrics: "Metrics", name: str, tags: Optional[Dict[str, str]] = None) -> None:
        self._metrics = metrics
        self.name = name
        self.tags = tags or {}
        self._started = time.monotonic()
        self._stopped = False

    def stop(self) -> float:
        elapsed = time.monotonic() - self._started
        if not self._stopped:
            self._stopped = True
            self._metrics.record_duration(self.name, elapsed, self.tags)
        return elapsed

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


class Metrics(ABC):
    """Base class for metrics backends."""

    @abstractmethod
    def increment(self, name: str, tags: Optional[Dict[str, str]] = None, value: float = 1.0) -> None:
        """Increment a counter."""
        ...

    @abstractmethod
    def record_duration(self, name: str, seconds: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record a timer sample."""
        ...

    def start_timer(self, name: str, tags: Optional[Dict[str, str]] = None) -> Timer:
        return Timer(self, name, tags)


class NullMetrics(Metrics):
    """Discards everything."""

    def increment(self, name: str, tags: Optional[Dict[str, str]] = None, value: float = 1.0) -> None:
        pass

    def record_duration(self, name: str, seconds: float, tags: Optional[Dict[str, str]] = None) -> None:
        pass


class InMemoryMetrics(Metrics):
    """Thread-safe in-process metrics, used by the CLI summary and in tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Dict[TagKey, float] = {}
        self._durations: Dict[TagKey, List[float]] = {}

    def increment(self, name: str, tags: Optional[Dict[str, str]] = None, value: float = 1.0) -> None:
        if value < 0:
            raise ValueError("Counter can only increase")
        key = _key(name, tags)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0.0) + value

    def record_duration(self, name: str, seconds: float, tags: Optional[Dict[str, str]] = None) -> None:
        key = _key(name, tags)
        with self._lock:
            self._durations.setdefault(key, []).append(seconds)

    def counter_value(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        """Return a counter value; without tags, the sum across all tag sets."""
        with self._lock:
            if tags is not None:
                return self._counters.get(_key(name, tags), 0.0)
            return sum(v for (n, _), v in self._counters.items() if n == name)

    def timer_count(self, name: str) -> int:
        with self._lock:
            return sum(len(v) for (n, _), v in self._durations.items() if n == name)

    def collect(self) -> List[Dict[str, object]]:
        """Collect all values for export."""
        with self._lock:
            rows: List[Dict[str, object]] = [
                {"name": name, "type": "counter", "tags": dict(tags), "value": value}
                for (name, tags), value in self._counters.items()
            ]
            rows.extend(
                {"name": name, "type": "timer", "tags": dict(tags), "count": len(samples), "total": sum(samples)}
                for (name, tags), samples in self._durations.items()
            )
        return rows
