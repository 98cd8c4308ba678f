# event_planner/services/event_monitor.py
"""
Event lifecycle status and the reminders derived from an event's state.
"""

from typing import List, Optional, Tuple
from datetime import datetime, timedelta, timezone
import math
import logging

from event_planner.models.schemas import (
    Event, Task, Guest, VendorBooking, Notification, Priority, TaskStatus, RSVPStatus
)

logger = logging.getLogger(__name__)

DEFAULT_EVENT_DURATION = timedelta(hours=24)
MAX_RUNNING_PROGRESS = 99

REMINDER_WINDOW_DAYS = 7
RSVP_WINDOW_DAYS = 14
VENDOR_WINDOW_DAYS = 30


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _share(elapsed: timedelta, total: timedelta) -> int:
    if total.total_seconds() <= 0:
        return MAX_RUNNING_PROGRESS
    return min(round(elapsed / total * 100), MAX_RUNNING_PROGRESS)


def event_status(event: Event, now: Optional[datetime] = None) -> Tuple[str, int]:
    """
    Where the event is in its lifecycle.

    Returns:
        (status, progress) where status is "planning", "in_progress" or
        "completed". Progress stays below 100 until the event has ended.
    """
    now = now or datetime.now(timezone.utc)
    start = event.start_date
    end = event.end_date or start + DEFAULT_EVENT_DURATION

    if now < start:
        created = event.created_at or now
        return "planning", max(_share(now - created, start - created), 0)
    if now <= end:
        return "in_progress", _share(now - start, end - start)
    return "completed", 100


def task_progress(tasks: List[Task]) -> int:
    """Percentage of completed tasks, 0 when there are none."""
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED.value)
    return round(completed / len(tasks) * 100)


def derive_notifications(
    event: Event,
    tasks: List[Task],
    guests: List[Guest],
    vendors: List[VendorBooking],
    now: Optional[datetime] = None
) -> List[Notification]:
    """Reminders for an upcoming event, overdue tasks, unanswered RSVPs and unconfirmed vendors."""
    now = now or datetime.now(timezone.utc)
    days = math.ceil((event.start_date - now).total_seconds() / 86400)
    notifications = []

    if 0 < days <= REMINDER_WINDOW_DAYS:
        notifications.append(Notification(
            user_id=event.user_id,
            entity_id=event.id,
            type="reminder",
            message=f"Your event starts in {_plural(days, 'day')}!",
            priority=Priority.HIGH
        ))

    overdue = [
        task for task in tasks
        if task.status != TaskStatus.COMPLETED.value and task.due_date is not None and task.due_date < now
    ]
    if overdue:
        notifications.append(Notification(
            user_id=event.user_id,
            entity_id=event.id,
            type="task",
            message=f"You have {_plural(len(overdue), 'overdue task')} that need attention.",
            priority=Priority.HIGH
        ))

    pending = [g for g in guests if not g.rsvp_status or g.rsvp_status == RSVPStatus.PENDING.value]
    if pending and days <= RSVP_WINDOW_DAYS:
        verb = "hasn't" if len(pending) == 1 else "haven't"
        notifications.append(Notification(
            user_id=event.user_id,
            entity_id=event.id,
            type="guest",
            message=f"{_plural(len(pending), 'guest')} {verb} responded to your invitation yet.",
            priority=Priority.MEDIUM
        ))

    unconfirmed = [v for v in vendors if v.status != "confirmed"]
    if unconfirmed and days <= VENDOR_WINDOW_DAYS:
        verb = "needs" if len(unconfirmed) == 1 else "need"
        notifications.append(Notification(
            user_id=event.user_id,
            entity_id=event.id,
            type="vendor",
            message=f"{_plural(len(unconfirmed), 'vendor')} {verb} confirmation.",
            priority=Priority.MEDIUM
        ))

    logger.debug(f"Derived {len(notifications)} notifications for event {event.id}")
    return notifications
