"""Tests for AuditStorage and AuditListener.

Test coverage for audit log persistence and querying.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from sweeper.events.audit import AuditListener, AuditStorage
from sweeper.events.bus import EventBus
from sweeper.events.models import EventType, ResourceEvent
from tests.fixtures.resources import NOW, create_marked_resource, create_work_configuration


def _event(event_type: EventType = EventType.MARK, days: int = 0) -> ResourceEvent:
    return ResourceEvent(
        event_type=event_type,
        marked_resource=create_marked_resource(),
        work_configuration=create_work_configuration(),
        timestamp=NOW + timedelta(days=days),
    )


@pytest.fixture
def storage(tmp_path: Path) -> AuditStorage:
    return AuditStorage(str(tmp_path / "audit"))


class TestAuditStorage:
    """Test suite for AuditStorage."""

    def test_log_event_writes_year_month_layout(self, storage: AuditStorage) -> None:
        event = _event()

        path = storage.log_event(event)

        assert path.exists()
        assert path.parent.name == "10"
        assert path.parent.parent.name == "2026"
        assert path.name == f"event-{event.event_id}.yaml"

    def test_get_event(self, storage: AuditStorage) -> None:
        event = _event(EventType.DELETE)
        storage.log_event(event)

        audit = storage.get_event(event.event_id)

        assert audit["metadata"]["log_type"] == "resource_lifecycle"
        assert audit["event"]["event_type"] == "delete"
        assert audit["event"]["marked_resource"]["namespace"] == "aws:test:us-east-1:image"

    def test_get_missing_event(self, storage: AuditStorage) -> None:
        assert storage.get_event("evt_missing") is None

    def test_query_by_date_range(self, storage: AuditStorage) -> None:
        """Test since/until bounds are inclusive and results sorted by time."""
        storage.log_event(_event(days=5))
        storage.log_event(_event(days=0))
        storage.log_event(_event(days=40))

        results = storage.query_events(since=NOW, until=NOW + timedelta(days=5))

        assert [r["event"]["timestamp"] for r in results] == [
            NOW.isoformat(),
            (NOW + timedelta(days=5)).isoformat(),
        ]

    def test_query_by_event_type(self, storage: AuditStorage) -> None:
        storage.log_event(_event(EventType.MARK))
        storage.log_event(_event(EventType.UNMARK))

        results = storage.query_events(event_type=EventType.UNMARK)

        assert len(results) == 1
        assert results[0]["event"]["event_type"] == "unmark"


class TestAuditListener:
    """Test suite for AuditListener."""

    def test_attached_listener_persists_published_events(self, storage: AuditStorage) -> None:
        bus = EventBus()
        AuditListener(storage).attach(bus)
        event = _event(EventType.DELETE)

        bus.publish(event)

        assert storage.get_event(event.event_id) is not None
