"""In-process lifecycle events.

The engine publishes MARK, UNMARK and DELETE events; consumers (audit log,
notification scheduling) subscribe independently.

Usage::

    bus = EventBus()
    bus.subscribe(lambda event: print(event.event_type), [EventType.DELETE])
    bus.publish(ResourceEvent(EventType.DELETE, marked_resource, work_configuration))
"""

from __future__ import annotations

from sweeper.events.bus import EventBus, EventHandler
from sweeper.events.models import EventType, ResourceEvent

__all__ = ["EventBus", "EventHandler", "EventType", "ResourceEvent"]
