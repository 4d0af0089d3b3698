"""In-process event bus with best-effort synchronous delivery."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Dict, Iterable, Optional, Tuple

from sweeper.events.models import EventType, ResourceEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[ResourceEvent], None]


class EventBus:
    """Decouples the lifecycle engine from event consumers.

    publish() calls each matching subscriber in the publishing thread. A
    failing subscriber is logged and never affects the publisher or the other
    subscribers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Tuple[EventHandler, Optional[frozenset]]] = {}

    def subscribe(self, handler: EventHandler, event_types: Optional[Iterable[EventType]] = None) -> str:
        """Register a handler.

        Args:
            handler: Callable receiving each matching ResourceEvent
            event_types: Event kinds to receive (default: all)

        Returns:
            Subscription id usable with unsubscribe()
        """
        subscription_id = str(uuid.uuid4())
        kinds = frozenset(event_types) if event_types is not None else None
        with self._lock:
            self._subscribers[subscription_id] = (handler, kinds)
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        with self._lock:
            return self._subscribers.pop(subscription_id, None) is not None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: ResourceEvent) -> int:
        """Deliver an event to every matching subscriber.

        Returns:
            Number of subscribers that handled the event without raising
        """
        with self._lock:
            targets = [h for h, kinds in self._subscribers.values() if kinds is None or event.event_type in kinds]

        delivered = 0
        for handler in targets:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(f"Event subscriber failed for {event.event_type.value} {event.marked_resource.resource_id}: {e}")
        return delivered
