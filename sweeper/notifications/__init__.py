"""Owner notification backends."""

from __future__ import annotations

from sweeper.notifications.base import LoggingNotifier, NotificationType, Notifier
from sweeper.notifications.sns import SnsNotifier

__all__ = ["LoggingNotifier", "NotificationType", "Notifier", "SnsNotifier"]
