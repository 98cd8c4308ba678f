# event_planner/services/budget_analyzer.py
from typing import List
from pydantic import BaseModel
import logging

from event_planner.models.schemas import Event, BudgetItem

logger = logging.getLogger(__name__)

WARNING_RATIO = 0.9


class CategorySummary(BaseModel):
    category: str
    estimated: float = 0.0
    actual: float = 0.0
    count: int = 0


class BudgetSummary(BaseModel):
    total_budget: float
    total_estimated: float
    total_actual: float
    total_paid: float
    categories: List[CategorySummary]
    status: str
    remaining: float


def actual_or_estimated(item: BudgetItem) -> float:
    """Spend for an item: the actual cost once known, otherwise the estimate."""
    return item.actual_cost if item.actual_cost else item.estimated_cost


def budget_status(total_budget: float, total_actual: float) -> str:
    if total_actual > total_budget:
        return "over"
    if total_actual >= total_budget * WARNING_RATIO:
        return "warning"
    return "good"


class BudgetAnalyzer:
    """Totals and per-category breakdown of an event's budget items."""

    def summarize(self, event: Event, budget_items: List[BudgetItem]) -> BudgetSummary:
        categories = {}
        for item in budget_items:
            summary = categories.setdefault(item.category, CategorySummary(category=item.category))
            summary.estimated += item.estimated_cost
            summary.actual += actual_or_estimated(item)
            summary.count += 1

        total_budget = event.budget or 0.0
        total_actual = sum(actual_or_estimated(item) for item in budget_items)
        status = budget_status(total_budget, total_actual)

        if status == "over":
            logger.warning(f"Event {event.id} is over budget by ${total_actual - total_budget:,.2f}")

        return BudgetSummary(
            total_budget=total_budget,
            total_estimated=sum(item.estimated_cost for item in budget_items),
            total_actual=total_actual,
            total_paid=sum(actual_or_estimated(item) for item in budget_items if item.is_paid),
            categories=sorted(categories.values(), key=lambda c: c.actual, reverse=True),
            status=status,
            remaining=total_budget - total_actual
        )
