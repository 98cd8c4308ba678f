"""Unit tests for EventStore."""
import pytest
from unittest.mock import Mock
from datetime import datetime, timezone

from event_planner.data_access.event_store import EventStore
from event_planner.data_access.postgres_client import PostgresClient
from event_planner.exceptions import RecordNotFoundError
from event_planner.models.schemas import Task, VendorLead, Notification


@pytest.fixture
def mock_client():
    return Mock(spec=PostgresClient)


@pytest.fixture
def store(mock_client):
    return EventStore(mock_client)


class TestEventReads:
    """Test reads of events and their children."""

    def test_get_event(self, store, mock_client):
        mock_client.select_one.return_value = {
            "id": "e1", "title": "Gala", "event_type": "Corporate",
            "budget": 5000, "estimated_guests": 80, "start_date": datetime(2025, 6, 1)
        }

        event = store.get_event("e1")

        mock_client.select_one.assert_called_once_with("events", [("id", "eq", "e1")])
        assert event.title == "Gala"
        assert event.start_date.tzinfo == timezone.utc

    def test_get_event_missing_propagates(self, store, mock_client):
        mock_client.select_one.side_effect = RecordNotFoundError("no row")

        with pytest.raises(RecordNotFoundError):
            store.get_event("missing")

    def test_upcoming_events_query(self, store, mock_client):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        mock_client.select.return_value = []

        store.get_upcoming_events(now=now, limit=10)

        mock_client.select.assert_called_once_with(
            "events",
            filters=[("start_date", "gte", now)],
            order_by="start_date",
            limit=10
        )

    def test_get_guests_lowercases_rsvp(self, store, mock_client):
        mock_client.select.return_value = [
            {"id": "g1", "event_id": "e1", "name": "Ann", "rsvp_status": "Confirmed"},
            {"id": "g2", "event_id": "e1", "name": "Bo", "rsvp_status": "Declined"},
            {"id": "g3", "event_id": "e1", "name": "Cy", "rsvp_status": "Maybe"},
            {"id": "g4", "event_id": "e1", "name": "Di", "rsvp_status": None},
        ]

        guests = store.get_guests("e1")

        assert [g.rsvp_status for g in guests] == ["confirmed", "declined", "maybe", None]

    def test_vendor_service_categories(self, store, mock_client):
        mock_client.select.return_value = [{"category": "Catering"}, {"category": "Decor"}]
        assert store.get_vendor_service_categories("v1") == ["Catering", "Decor"]


class TestWrites:
    """Test inserts, updates and upserts."""

    def test_insert_task_omits_unset_columns(self, store, mock_client):
        mock_client.insert.return_value = [{"id": "t1", "event_id": "e1", "title": "Book venue", "status": "pending"}]

        stored = store.insert_task(Task(event_id="e1", title="Book venue", priority="high"))

        table, row = mock_client.insert.call_args[0]
        assert table == "event_tasks"
        assert row == {"event_id": "e1", "title": "Book venue", "status": "pending", "priority": "high"}
        assert stored.id == "t1"

    def test_upsert_vendor_lead_keeps_status_on_conflict(self, store, mock_client):
        lead = VendorLead(vendor_id="v1", event_id="e1", match_score=90, match_reason="r", suggested_approach="a")

        store.upsert_vendor_lead(lead)

        kwargs = mock_client.upsert.call_args[1]
        assert kwargs["conflict_columns"] == ["vendor_id", "event_id"]
        assert "status" not in kwargs["update_columns"]
        row = mock_client.upsert.call_args[0][1]
        assert row["status"] == "new"
        assert "event" not in row

    def test_mark_recommendation_applied(self, store, mock_client):
        store.mark_recommendation_applied("r1")
        mock_client.update.assert_called_once_with("ai_recommendations", {"is_applied": True}, [("id", "eq", "r1")])

    def test_insert_notification(self, store, mock_client):
        mock_client.insert.return_value = [{"id": "n1", "user_id": "u1", "message": "Hi", "type": "task"}]

        store.insert_notification(Notification(user_id="u1", message="Hi", type="task"))

        row = mock_client.insert.call_args[0][1]
        assert row["is_read"] is False
        assert row["priority"] == "medium"
        assert "id" not in row


class TestNotificationsAndSettings:
    """Test notification listing and system settings."""

    def test_unread_only_by_default(self, store, mock_client):
        mock_client.select.return_value = []

        store.get_notifications("u1")

        kwargs = mock_client.select.call_args[1]
        assert ("is_read", "eq", False) in kwargs["filters"]
        assert kwargs["limit"] == 20
        assert kwargs["descending"] is True

    def test_include_read(self, store, mock_client):
        mock_client.select.return_value = []

        store.get_notifications("u1", limit=5, include_read=True)

        kwargs = mock_client.select.call_args[1]
        assert kwargs["filters"] == [("user_id", "eq", "u1")]
        assert kwargs["limit"] == 5

    def test_system_setting(self, store, mock_client):
        mock_client.select_one.return_value = {"setting_key": "openai.api_key", "setting_value": "sk-db"}
        assert store.get_system_setting("openai.api_key") == "sk-db"

    def test_missing_system_setting(self, store, mock_client):
        mock_client.select_one.side_effect = RecordNotFoundError("no row")
        assert store.get_system_setting("openai.api_key") is None
