"""In-service gate for scheduled agents."""

from __future__ import annotations

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    UP = "UP"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class HealthGate:
    """Process-level liveness flag.

    Agents skip their tick entirely while the gate is out of service, e.g.
    during deploys or when an operator drains an instance.
    """

    def __init__(self, status: HealthStatus = HealthStatus.UP) -> None:
        self._lock = threading.Lock()
        self._status = status

    @property
    def status(self) -> HealthStatus:
        with self._lock:
            return self._status

    def is_up(self) -> bool:
        return self.status == HealthStatus.UP

    def set_status(self, status: HealthStatus) -> None:
        with self._lock:
            previous, self._status = self._status, status
        if previous != status:
            logger.info(f"Health status changed {previous.value} -> {status.value}")
