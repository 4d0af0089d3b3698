"""Notifier interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class NotificationType(Enum):
    """Notification channels understood by notifiers."""

    EMAIL = "EMAIL"
    SLACK = "SLACK"


class Notifier(ABC):
    """Delivers owner notifications.

    Delivery is fire-and-forget from the lifecycle engine's point of view;
    implementations raise on failure so the caller can decide whether to
    record the notification.
    """

    @abstractmethod
    def notify(self, recipients: List[str], context: Dict[str, Any], notification_type: str) -> None:
        pass


class LoggingNotifier(Notifier):
    """Writes notifications to the log. Default when no backend is configured."""

    def notify(self, recipients: List[str], context: Dict[str, Any], notification_type: str) -> None:
        NotificationType(notification_type)
        logger.info(
            f"[{notification_type}] to {', '.join(recipients)}: "
            f"{len(context.get('resources', []))} resource(s) scheduled for deletion"
        )
