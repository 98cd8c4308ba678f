# event_planner/engines/recommendations.py
"""
Rule-based recommendations for an event.

The engine turns the current state of an event (tasks, budget items, guests
and the owner's preferences) into up to four recommendations: budget
allocation, vendors, planning timeline and guest experience. The service
around it loads that state, stores the results and applies them.
"""

from typing import Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel
import argparse
import logging
import math

from event_planner.config.settings import Settings
from event_planner.data_access.postgres_client import PostgresClient
from event_planner.data_access.event_store import EventStore
from event_planner.engines.templates import (
    DEFAULT_EVENT_TYPE,
    BUDGET_ALLOCATIONS,
    SENSITIVITY_FACTORS,
    SAMPLE_VENDORS,
    TIMELINE_TEMPLATES,
    GUEST_EXPERIENCE_IDEAS,
)
from event_planner.models.schemas import (
    Event, Task, BudgetItem, Guest, UserPreferences, Recommendation,
    BudgetRecommendation, VendorRecommendation, TimelineRecommendation, GuestRecommendation,
    BudgetAllocation, VendorSuggestion, TimelineTask, GuestIdea, TaskStatus, UserFeedback
)


logger = logging.getLogger(__name__)

# Skip the budget recommendation once this share of the budget is allocated
BUDGET_UTILIZATION_CEILING = 0.9
LONG_RANGE_DAYS = 90
MEDIUM_RANGE_DAYS = 30
TOP_VENDORS = 3


class EventSnapshot(BaseModel):
    """Figures derived from an event's current state."""
    event_type: Optional[str]
    days_until_event: int
    task_completion_rate: float
    confirmed_guests: int
    estimated_guests: int
    total_budget: float
    allocated_budget: float
    budget_utilization_rate: float
    preferences: UserPreferences


def days_until(start: datetime, now: datetime) -> int:
    """Whole days until `start`, rounded up."""
    return math.ceil((start - now).total_seconds() / 86400)


def timeline_bucket(days_until_event: int) -> Optional[str]:
    """Map days-until-event to a template bucket; None once the event has passed."""
    if days_until_event < 0:
        return None
    if days_until_event > LONG_RANGE_DAYS:
        return "long"
    if days_until_event >= MEDIUM_RANGE_DAYS:
        return "medium"
    return "short"


def adjust_allocations(allocations: Dict[str, float], sensitivity: str) -> Dict[str, float]:
    """
    Scale category shares by budget sensitivity and renormalize them to sum to 1.

    Args:
        allocations: Baseline share per category
        sensitivity: "low", "medium" or "high"; anything else is treated as medium

    Returns:
        Adjusted share per category, in the baseline's category order
    """
    factors = SENSITIVITY_FACTORS.get(sensitivity, SENSITIVITY_FACTORS["medium"])
    adjusted = {
        category: share * factors.get(category, factors["other"])
        for category, share in allocations.items()
    }
    total = sum(adjusted.values())
    return {category: share / total for category, share in adjusted.items()}


class RecommendationEngine:
    """Pure recommendation rules; no I/O."""

    CONFIDENCE = {"budget": 85, "vendor": 80, "timeline": 90, "guest": 75}

    def analyze(
        self,
        event: Event,
        tasks: List[Task],
        budget_items: List[BudgetItem],
        guests: List[Guest],
        preferences: Optional[UserPreferences] = None,
        now: Optional[datetime] = None
    ) -> EventSnapshot:
        now = now or datetime.now(timezone.utc)

        completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED.value)
        allocated = sum(item.estimated_cost for item in budget_items)
        total_budget = event.budget or 0.0

        return EventSnapshot(
            event_type=event.event_type,
            days_until_event=days_until(event.start_date, now),
            task_completion_rate=completed / len(tasks) if tasks else 0.0,
            confirmed_guests=sum(1 for guest in guests if guest.rsvp_status == "confirmed"),
            estimated_guests=event.estimated_guests or 0,
            total_budget=total_budget,
            allocated_budget=allocated,
            budget_utilization_rate=allocated / total_budget if total_budget > 0 else 0.0,
            preferences=preferences or UserPreferences()
        )

    def budget_recommendation(
        self, snapshot: EventSnapshot, budget_items: List[BudgetItem]
    ) -> Optional[BudgetRecommendation]:
        if snapshot.budget_utilization_rate > BUDGET_UTILIZATION_CEILING:
            return None

        baseline = BUDGET_ALLOCATIONS.get(snapshot.event_type, BUDGET_ALLOCATIONS[DEFAULT_EVENT_TYPE])
        shares = adjust_allocations(baseline, snapshot.preferences.budget_sensitivity)

        details = [
            BudgetAllocation(
                category=category,
                percentage=share * 100,
                amount=snapshot.total_budget * share,
                allocated=sum(item.estimated_cost for item in budget_items if item.category == category)
            )
            for category, share in shares.items()
        ]

        type_label = (snapshot.event_type or "event").lower()
        return BudgetRecommendation(
            title="Optimized Budget Allocation",
            description=(
                "Based on your event type and preferences, we've created a personalized budget "
                f"allocation plan to help you maximize your {type_label} budget of "
                f"${snapshot.total_budget:,.0f}."
            ),
            details=details,
            confidence=self.CONFIDENCE["budget"]
        )

    def vendor_recommendation(self, snapshot: EventSnapshot) -> Optional[VendorRecommendation]:
        if not snapshot.event_type or not snapshot.estimated_guests:
            return None

        vendors = [VendorSuggestion(**v) for v in SAMPLE_VENDORS.get(snapshot.event_type, [])]

        preferred = snapshot.preferences.vendor_preferences
        candidates = [v for v in vendors if v.category in preferred] if preferred else vendors
        if not candidates:
            candidates = vendors

        top = sorted(candidates, key=lambda v: v.rating, reverse=True)[:TOP_VENDORS]
        if not top:
            return None

        return VendorRecommendation(
            title="Recommended Vendors",
            description=(
                f"Based on your {snapshot.event_type.lower()} needs and preferences, we've identified "
                "these top-rated vendors that would be perfect for your event."
            ),
            details=top,
            confidence=self.CONFIDENCE["vendor"]
        )

    def timeline_recommendation(
        self, snapshot: EventSnapshot, tasks: List[Task]
    ) -> Optional[TimelineRecommendation]:
        bucket = timeline_bucket(snapshot.days_until_event)
        if bucket is None:
            return None

        templates = TIMELINE_TEMPLATES.get(snapshot.event_type, TIMELINE_TEMPLATES[DEFAULT_EVENT_TYPE])
        existing = {task.title.lower() for task in tasks}
        remaining = [TimelineTask(**t) for t in templates[bucket] if t["title"].lower() not in existing]
        if not remaining:
            return None

        return TimelineRecommendation(
            title="Recommended Timeline",
            description=(
                f"With {snapshot.days_until_event} days until your event, here are the key tasks "
                "you should focus on now."
            ),
            details=remaining,
            confidence=self.CONFIDENCE["timeline"]
        )

    def guest_recommendation(self, snapshot: EventSnapshot) -> Optional[GuestRecommendation]:
        if snapshot.estimated_guests == 0:
            return None

        ideas = GUEST_EXPERIENCE_IDEAS.get(snapshot.event_type, GUEST_EXPERIENCE_IDEAS[DEFAULT_EVENT_TYPE])
        type_label = (snapshot.event_type or "event").lower()
        return GuestRecommendation(
            title="Guest Experience Enhancements",
            description=(
                f"Elevate your {type_label} with these personalized guest experience ideas "
                "that will make your event memorable."
            ),
            details=[GuestIdea(**idea) for idea in ideas],
            confidence=self.CONFIDENCE["guest"]
        )

    def generate(
        self,
        event: Event,
        tasks: List[Task],
        budget_items: List[BudgetItem],
        guests: List[Guest],
        preferences: Optional[UserPreferences] = None,
        now: Optional[datetime] = None
    ) -> list:
        """
        Produce up to four recommendation contents in budget, vendor, timeline, guest order.

        Returns:
            List of BudgetRecommendation / VendorRecommendation /
            TimelineRecommendation / GuestRecommendation
        """
        snapshot = self.analyze(event, tasks, budget_items, guests, preferences, now)
        candidates = [
            self.budget_recommendation(snapshot, budget_items),
            self.vendor_recommendation(snapshot),
            self.timeline_recommendation(snapshot, tasks),
            self.guest_recommendation(snapshot),
        ]
        results = [c for c in candidates if c is not None]
        logger.info(
            f"Generated {len(results)} recommendations for event {event.id} "
            f"({snapshot.days_until_event} days out, {snapshot.budget_utilization_rate:.0%} of budget allocated)"
        )
        return results


class RecommendationService:
    """Loads event state, stores generated recommendations and applies them."""

    def __init__(self, store: EventStore, engine: Optional[RecommendationEngine] = None):
        self.store = store
        self.engine = engine or RecommendationEngine()

    def get_or_create_preferences(self, user_id: Optional[str]) -> UserPreferences:
        """Return the user's preferences, storing defaults on first access."""
        if not user_id:
            return UserPreferences()

        preferences = self.store.get_user_preferences(user_id)
        if preferences is None:
            logger.info(f"No preferences for user {user_id}, creating defaults")
            preferences = self.store.create_user_preferences(UserPreferences(user_id=user_id))
        return preferences

    def generate_recommendations(self, event_id: str, now: Optional[datetime] = None) -> List[Recommendation]:
        """Run the engine for an event and store one row per recommendation."""
        event = self.store.get_event(event_id)
        tasks = self.store.get_tasks(event_id)
        budget_items = self.store.get_budget_items(event_id)
        guests = self.store.get_guests(event_id)
        preferences = self.get_or_create_preferences(event.user_id)

        contents = self.engine.generate(event, tasks, budget_items, guests, preferences, now)

        stored = []
        for content in contents:
            recommendation = Recommendation(event_id=event.id, user_id=event.user_id, content=content)
            stored.append(self.store.insert_recommendation(recommendation))

        logger.info(f"Saved {len(stored)} recommendations for event {event_id}")
        return stored

    def get_recommendations(self, event_id: str) -> List[Recommendation]:
        """Stored recommendations for an event, newest first."""
        return self.store.get_recommendations(event_id)

    def apply_recommendation(self, recommendation: Recommendation) -> dict:
        """
        Turn a timeline or budget recommendation into tasks or budget items, then mark it applied.

        Writes happen one by one. If one fails, the rows already written stay
        and the recommendation is left unmarked.

        Returns:
            Dictionary with the number of tasks and budget items created
        """
        if recommendation.is_applied:
            logger.warning(f"Recommendation {recommendation.id} was already applied; applying again")

        tasks_created = 0
        budget_items_created = 0
        content = recommendation.content

        if content.kind == "timeline":
            existing = {task.title.lower() for task in self.store.get_tasks(recommendation.event_id)}
            for item in content.details:
                if item.title.lower() in existing:
                    logger.info(f"Skipping task '{item.title}', already on the event")
                    continue
                self.store.insert_task(Task(
                    event_id=recommendation.event_id,
                    title=item.title,
                    description=item.title,
                    priority=item.priority,
                    status=TaskStatus.PENDING
                ))
                existing.add(item.title.lower())
                tasks_created += 1

        elif content.kind == "budget":
            for allocation in content.details:
                if allocation.allocated < allocation.amount:
                    self.store.insert_budget_item(BudgetItem(
                        event_id=recommendation.event_id,
                        category=allocation.category,
                        item_name=f"{allocation.category} Budget",
                        estimated_cost=round(allocation.amount - allocation.allocated, 2),
                        is_paid=False,
                        notes="Added from AI recommendation"
                    ))
                    budget_items_created += 1

        self.store.mark_recommendation_applied(recommendation.id)

        logger.info(
            f"Applied {content.kind} recommendation {recommendation.id}: "
            f"{tasks_created} tasks, {budget_items_created} budget items"
        )
        return {
            "tasks_created": tasks_created,
            "budget_items_created": budget_items_created
        }

    def record_feedback(self, recommendation: Recommendation, positive: bool) -> str:
        """
        Store thumbs-up / thumbs-down for a recommendation.

        Feedback can be given once; repeating the same answer is a no-op and a
        different answer is rejected.
        """
        feedback = UserFeedback.POSITIVE.value if positive else UserFeedback.NEGATIVE.value

        if recommendation.user_feedback == feedback:
            return feedback
        if recommendation.user_feedback is not None:
            raise ValueError(
                f"Feedback for recommendation {recommendation.id} is already '{recommendation.user_feedback}'"
            )

        self.store.set_recommendation_feedback(recommendation.id, feedback)
        logger.info(f"Recorded {feedback} feedback for recommendation {recommendation.id}")
        return feedback


def main():
    """Main entry point for generating recommendations for one event."""
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description='Generate personalized recommendations for an event.')
    parser.add_argument('--event-id', required=True, help='Event to generate recommendations for')
    args = parser.parse_args()

    config = Settings()
    logging.getLogger().setLevel(config.log_level.upper())

    with PostgresClient(config) as client:
        service = RecommendationService(EventStore(client))
        recommendations = service.generate_recommendations(args.event_id)

    print("\n" + "="*60)
    print("RECOMMENDATIONS")
    print("="*60)
    for rec in recommendations:
        print(f"[{rec.kind}] {rec.content.title} ({rec.content.confidence}% match)")
        print(f"  {rec.content.description}")
        for detail in rec.content.details:
            print(f"  - {detail.model_dump()}")
    print("="*60)


if __name__ == "__main__":
    main()
