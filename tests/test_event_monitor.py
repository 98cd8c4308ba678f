"""Unit tests for event status and derived notifications."""
import pytest
from datetime import datetime, timedelta, timezone

from event_planner.services.event_monitor import event_status, task_progress, derive_notifications
from event_planner.models.schemas import Event, Task, Guest, VendorBooking


NOW = datetime(2025, 4, 10, 12, 0, tzinfo=timezone.utc)


def make_event(days_out, created_days_ago=30, end=None):
    return Event(
        id="e1",
        user_id="u1",
        start_date=NOW + timedelta(days=days_out),
        end_date=end,
        created_at=NOW - timedelta(days=created_days_ago)
    )


class TestEventStatus:
    """Test event_status."""

    def test_planning_progress(self):
        status, progress = event_status(make_event(days_out=30, created_days_ago=30), NOW)

        assert status == "planning"
        assert progress == 50

    def test_planning_progress_capped(self):
        event = make_event(days_out=0, created_days_ago=30).model_copy(
            update={"start_date": NOW + timedelta(minutes=1)}
        )
        assert event_status(event, NOW) == ("planning", 99)

    def test_in_progress_defaults_to_one_day(self):
        status, progress = event_status(make_event(days_out=-0.5), NOW)

        assert status == "in_progress"
        assert progress == 50

    def test_in_progress_with_end_date(self):
        event = make_event(days_out=-1, end=NOW + timedelta(days=1))
        assert event_status(event, NOW) == ("in_progress", 50)

    def test_completed(self):
        assert event_status(make_event(days_out=-2), NOW) == ("completed", 100)


class TestTaskProgress:
    """Test task_progress."""

    def test_no_tasks(self):
        assert task_progress([]) == 0

    def test_rounded_percentage(self):
        tasks = [
            Task(event_id="e1", title="a", status="completed"),
            Task(event_id="e1", title="b", status="in_progress"),
            Task(event_id="e1", title="c"),
        ]
        assert task_progress(tasks) == 33


class TestDeriveNotifications:
    """Test derive_notifications."""

    def test_all_reminders(self):
        tasks = [
            Task(event_id="e1", title="Order cake", due_date=NOW - timedelta(days=1)),
            Task(event_id="e1", title="Book DJ", status="completed", due_date=NOW - timedelta(days=2)),
            Task(event_id="e1", title="Buy balloons", due_date=NOW + timedelta(days=1)),
        ]
        guests = [Guest(event_id="e1", name="Ann"), Guest(event_id="e1", name="Bo", rsvp_status="confirmed")]
        vendors = [VendorBooking(event_id="e1", status="pending"), VendorBooking(event_id="e1", status="confirmed")]

        notifications = derive_notifications(make_event(days_out=5), tasks, guests, vendors, NOW)

        assert [n.type for n in notifications] == ["reminder", "task", "guest", "vendor"]
        assert notifications[0].message == "Your event starts in 5 days!"
        assert notifications[0].priority == "high"
        assert notifications[1].message == "You have 1 overdue task that need attention."
        assert notifications[2].message == "1 guest hasn't responded to your invitation yet."
        assert notifications[3].message == "1 vendor needs confirmation."
        assert all(n.user_id == "u1" and n.entity_id == "e1" for n in notifications)

    def test_capitalized_pending_rsvp(self):
        guests = [
            Guest(event_id="e1", name="Ann", rsvp_status="Pending"),
            Guest(event_id="e1", name="Bo", rsvp_status="Confirmed"),
        ]

        notifications = derive_notifications(make_event(days_out=10), [], guests, [], NOW)

        assert [n.message for n in notifications if n.type == "guest"] == [
            "1 guest hasn't responded to your invitation yet."
        ]

    def test_windows(self):
        guests = [Guest(event_id="e1", name="Ann")]
        vendors = [VendorBooking(event_id="e1", status="pending")]

        notifications = derive_notifications(make_event(days_out=20), [], guests, vendors, NOW)

        assert [n.type for n in notifications] == ["vendor"]

    def test_nothing_far_out(self):
        guests = [Guest(event_id="e1", name="Ann")]
        vendors = [VendorBooking(event_id="e1", status="pending")]

        assert derive_notifications(make_event(days_out=60), [], guests, vendors, NOW) == []

    def test_no_reminder_on_event_day(self):
        notifications = derive_notifications(make_event(days_out=0), [], [], [], NOW)
        assert notifications == []
