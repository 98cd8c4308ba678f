# event_planner/services/notifications.py
from typing import List, Optional
import logging

from event_planner.data_access.event_store import EventStore
from event_planner.models.schemas import Notification, Priority

logger = logging.getLogger(__name__)


class NotificationStore:
    """Per-user notifications kept in the notifications table."""

    def __init__(self, store: EventStore):
        self.store = store

    def send(
        self,
        user_id: str,
        message: str,
        type: str,
        entity_id: Optional[str] = None,
        priority: Priority = Priority.MEDIUM
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            message=message,
            type=type,
            entity_id=entity_id,
            priority=priority,
            is_read=False
        )
        stored = self.store.insert_notification(notification)
        logger.info(f"Sent {type} notification to user {user_id}")
        return stored

    def send_all(self, notifications: List[Notification]) -> List[Notification]:
        """Store notifications built elsewhere, e.g. by derive_notifications."""
        return [self.store.insert_notification(n) for n in notifications]

    def mark_read(self, notification_id: str) -> None:
        self.store.mark_notification_read(notification_id)

    def list_for_user(self, user_id: str, limit: int = 20, include_read: bool = False) -> List[Notification]:
        """Newest first; unread only unless include_read is set."""
        return self.store.get_notifications(user_id, limit=limit, include_read=include_read)
