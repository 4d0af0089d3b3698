"""Tests for EventBus."""

from __future__ import annotations

from unittest.mock import Mock

from sweeper.events.bus import EventBus
from sweeper.events.models import EventType, ResourceEvent
from tests.fixtures.resources import NOW, create_marked_resource, create_work_configuration


def _event(event_type: EventType = EventType.MARK) -> ResourceEvent:
    return ResourceEvent(
        event_type=event_type,
        marked_resource=create_marked_resource(),
        work_configuration=create_work_configuration(),
        timestamp=NOW,
    )


class TestEventBus:
    """Test suite for EventBus delivery."""

    def test_publish_delivers_to_all_subscribers(self) -> None:
        bus = EventBus()
        first, second = Mock(), Mock()
        bus.subscribe(first)
        bus.subscribe(second)
        event = _event()

        delivered = bus.publish(event)

        assert delivered == 2
        first.assert_called_once_with(event)
        second.assert_called_once_with(event)

    def test_subscriber_filters_by_event_type(self) -> None:
        bus = EventBus()
        deletes = Mock()
        bus.subscribe(deletes, event_types=[EventType.DELETE])

        bus.publish(_event(EventType.MARK))
        bus.publish(_event(EventType.DELETE))

        assert deletes.call_count == 1
        assert deletes.call_args[0][0].event_type == EventType.DELETE

    def test_failing_subscriber_is_isolated(self) -> None:
        """Test one failing consumer does not block the others or the publisher."""
        bus = EventBus()
        healthy = Mock()
        bus.subscribe(Mock(side_effect=RuntimeError("boom")))
        bus.subscribe(healthy)

        delivered = bus.publish(_event())

        assert delivered == 1
        healthy.assert_called_once()

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        handler = Mock()
        subscription_id = bus.subscribe(handler)

        assert bus.unsubscribe(subscription_id) is True
        assert bus.subscriber_count == 0
        assert bus.publish(_event()) == 0
        handler.assert_not_called()

    def test_publish_without_subscribers(self) -> None:
        assert EventBus().publish(_event()) == 0


class TestResourceEvent:
    """Test suite for ResourceEvent."""

    def test_event_ids_are_unique(self) -> None:
        assert _event().event_id != _event().event_id

    def test_to_dict(self) -> None:
        event = _event(EventType.UNMARK)

        data = event.to_dict()

        assert data["event_type"] == "unmark"
        assert data["namespace"] == "aws:test:us-east-1:image"
        assert data["dry_run"] is False
        assert data["marked_resource"]["resource"]["resource_id"] == "ami-0001"
