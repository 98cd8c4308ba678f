"""Unit tests for BudgetAnalyzer."""
import pytest
from datetime import datetime, timezone

from event_planner.services.budget_analyzer import BudgetAnalyzer, budget_status
from event_planner.models.schemas import Event, BudgetItem


@pytest.fixture
def event():
    return Event(id="e1", event_type="Birthday", budget=2000, start_date=datetime(2025, 5, 1, tzinfo=timezone.utc))


class TestBudgetStatus:
    """Test budget_status thresholds."""

    @pytest.mark.parametrize("actual,status", [
        (2100, "over"), (2000, "warning"), (1800, "warning"), (1799.99, "good"), (0, "good"),
    ])
    def test_thresholds(self, actual, status):
        assert budget_status(2000, actual) == status


class TestBudgetAnalyzer:
    """Test BudgetAnalyzer.summarize."""

    def test_summary(self, event):
        items = [
            BudgetItem(event_id="e1", category="Venue", item_name="Hall", estimated_cost=800, actual_cost=900, is_paid=True),
            BudgetItem(event_id="e1", category="Food", item_name="Pizza", estimated_cost=300),
            BudgetItem(event_id="e1", category="Food", item_name="Cake", estimated_cost=100, actual_cost=120),
        ]

        summary = BudgetAnalyzer().summarize(event, items)

        assert summary.total_estimated == 1200
        assert summary.total_actual == 1320
        assert summary.total_paid == 900
        assert summary.remaining == 680
        assert summary.status == "good"
        assert [(c.category, c.actual, c.count) for c in summary.categories] == [("Venue", 900, 1), ("Food", 420, 2)]

    def test_over_budget(self, event):
        items = [BudgetItem(event_id="e1", category="Venue", item_name="Hall", estimated_cost=2500)]

        summary = BudgetAnalyzer().summarize(event, items)

        assert summary.status == "over"
        assert summary.remaining == -500

    def test_no_items(self, event):
        summary = BudgetAnalyzer().summarize(event, [])

        assert summary.total_actual == 0
        assert summary.categories == []
        assert summary.status == "good"
