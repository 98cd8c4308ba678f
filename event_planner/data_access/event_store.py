# event_planner/data_access/event_store.py
"""
Event planning tables on top of the generic Postgres client.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from event_planner.data_access.postgres_client import PostgresClient
from event_planner.exceptions import RecordNotFoundError
from event_planner.models.schemas import (
    Event, Task, BudgetItem, Guest, VendorBooking, UserPreferences,
    Recommendation, VendorLead, FeedbackEntry, FeedbackAnalysis, Notification
)

logger = logging.getLogger(__name__)

EVENTS_TABLE = "events"
TASKS_TABLE = "event_tasks"
BUDGET_ITEMS_TABLE = "event_budget_items"
GUESTS_TABLE = "event_guests"
VENDOR_BOOKINGS_TABLE = "event_vendor_bookings"
VENDOR_SERVICES_TABLE = "vendor_services"
USER_PREFERENCES_TABLE = "user_preferences"
RECOMMENDATIONS_TABLE = "ai_recommendations"
VENDOR_LEADS_TABLE = "ai_vendor_leads"
FEEDBACK_TABLE = "event_feedback"
FEEDBACK_ANALYSIS_TABLE = "event_feedback_analysis"
NOTIFICATIONS_TABLE = "notifications"
SYSTEM_SETTINGS_TABLE = "system_settings"


class EventStore:
    """Typed reads and writes for events and everything hanging off them."""

    def __init__(self, client: PostgresClient):
        self.client = client

    # Events ----------------------------------------------------------------

    def get_event(self, event_id: str) -> Event:
        row = self.client.select_one(EVENTS_TABLE, [("id", "eq", event_id)])
        return Event(**row)

    def get_upcoming_events(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> List[Event]:
        """Events starting at or after `now`, soonest first."""
        now = now or datetime.now(timezone.utc)
        rows = self.client.select(
            EVENTS_TABLE,
            filters=[("start_date", "gte", now)],
            order_by="start_date",
            limit=limit
        )
        return [Event(**row) for row in rows]

    def get_tasks(self, event_id: str) -> List[Task]:
        rows = self.client.select(TASKS_TABLE, filters=[("event_id", "eq", event_id)])
        return [Task(**row) for row in rows]

    def get_budget_items(self, event_id: str) -> List[BudgetItem]:
        rows = self.client.select(BUDGET_ITEMS_TABLE, filters=[("event_id", "eq", event_id)])
        return [BudgetItem(**row) for row in rows]

    def get_guests(self, event_id: str) -> List[Guest]:
        rows = self.client.select(GUESTS_TABLE, filters=[("event_id", "eq", event_id)])
        return [Guest(**row) for row in rows]

    def get_vendor_bookings(self, event_id: str) -> List[VendorBooking]:
        rows = self.client.select(VENDOR_BOOKINGS_TABLE, filters=[("event_id", "eq", event_id)])
        return [VendorBooking(**row) for row in rows]

    def get_vendor_service_categories(self, vendor_id: str) -> List[str]:
        rows = self.client.select(
            VENDOR_SERVICES_TABLE,
            filters=[("vendor_id", "eq", vendor_id)],
            columns=["category"]
        )
        return [row["category"] for row in rows]

    def insert_task(self, task: Task) -> Task:
        row = task.model_dump(exclude={"id", "updated_at"}, exclude_none=True)
        return Task(**self.client.insert(TASKS_TABLE, row)[0])

    def insert_budget_item(self, item: BudgetItem) -> BudgetItem:
        row = item.model_dump(exclude={"id"}, exclude_none=True)
        return BudgetItem(**self.client.insert(BUDGET_ITEMS_TABLE, row)[0])

    # Preferences -----------------------------------------------------------

    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        rows = self.client.select(USER_PREFERENCES_TABLE, filters=[("user_id", "eq", user_id)], limit=1)
        return UserPreferences.from_row(rows[0]) if rows else None

    def create_user_preferences(self, preferences: UserPreferences) -> UserPreferences:
        self.client.insert(USER_PREFERENCES_TABLE, preferences.to_row())
        return preferences

    # Recommendations -------------------------------------------------------

    def insert_recommendation(self, recommendation: Recommendation) -> Recommendation:
        row = self.client.insert(RECOMMENDATIONS_TABLE, recommendation.to_row())[0]
        return Recommendation.from_row(row)

    def get_recommendations(self, event_id: str) -> List[Recommendation]:
        rows = self.client.select(
            RECOMMENDATIONS_TABLE,
            filters=[("event_id", "eq", event_id)],
            order_by="created_at",
            descending=True
        )
        return [Recommendation.from_row(row) for row in rows]

    def mark_recommendation_applied(self, recommendation_id: str) -> None:
        self.client.update(RECOMMENDATIONS_TABLE, {"is_applied": True}, [("id", "eq", recommendation_id)])

    def set_recommendation_feedback(self, recommendation_id: str, feedback: str) -> None:
        self.client.update(RECOMMENDATIONS_TABLE, {"user_feedback": feedback}, [("id", "eq", recommendation_id)])

    # Vendor leads ----------------------------------------------------------

    def upsert_vendor_lead(self, lead: VendorLead) -> None:
        """Insert a lead, or refresh score/reason/approach of an existing one."""
        self.client.upsert(
            VENDOR_LEADS_TABLE,
            lead.model_dump(exclude={"event"}),
            conflict_columns=["vendor_id", "event_id"],
            update_columns=["match_score", "match_reason", "suggested_approach"]
        )

    def get_vendor_leads(self, vendor_id: str) -> List[VendorLead]:
        rows = self.client.select(
            VENDOR_LEADS_TABLE,
            filters=[("vendor_id", "eq", vendor_id)],
            order_by="match_score",
            descending=True
        )
        return [
            VendorLead(**{k: row[k] for k in VendorLead.model_fields if k in row and k != "event"})
            for row in rows
        ]

    # Feedback --------------------------------------------------------------

    def get_feedback(self, event_id: str) -> List[FeedbackEntry]:
        rows = self.client.select(FEEDBACK_TABLE, filters=[("event_id", "eq", event_id)])
        return [FeedbackEntry(**row) for row in rows]

    def upsert_feedback_analysis(self, analysis: FeedbackAnalysis) -> None:
        self.client.upsert(FEEDBACK_ANALYSIS_TABLE, analysis.to_row(), conflict_columns=["event_id"])

    # Notifications ---------------------------------------------------------

    def insert_notification(self, notification: Notification) -> Notification:
        row = notification.model_dump(exclude={"id"}, exclude_none=True)
        return Notification(**self.client.insert(NOTIFICATIONS_TABLE, row)[0])

    def mark_notification_read(self, notification_id: str) -> None:
        self.client.update(NOTIFICATIONS_TABLE, {"is_read": True}, [("id", "eq", notification_id)])

    def get_notifications(self, user_id: str, limit: int = 20, include_read: bool = False) -> List[Notification]:
        filters = [("user_id", "eq", user_id)]
        if not include_read:
            filters.append(("is_read", "eq", False))
        rows = self.client.select(
            NOTIFICATIONS_TABLE,
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=limit
        )
        return [Notification(**row) for row in rows]

    # Settings --------------------------------------------------------------

    def get_system_setting(self, key: str) -> Optional[str]:
        """Read a value from system_settings, None when the key is absent."""
        try:
            row = self.client.select_one(SYSTEM_SETTINGS_TABLE, [("setting_key", "eq", key)])
        except RecordNotFoundError:
            logger.info(f"System setting '{key}' not set")
            return None
        return row.get("setting_value")
