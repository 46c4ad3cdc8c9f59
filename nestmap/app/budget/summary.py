"""Budget summary computed from activity cost fields."""

from collections.abc import Iterable

from nestmap.app.models.activity import Activity
from nestmap.app.models.budget import BudgetSummary
from nestmap.app.models.common import CostCategory
from nestmap.app.models.trip import Trip


def activity_share(activity: Activity) -> float:
    """Per-person cost of a paid activity (actual cost, else estimated price)."""
    cost = activity.actual_cost if activity.actual_cost is not None else activity.price
    if not cost:
        return 0.0
    return cost / max(activity.split_between, 1)


def summarize_budget(trip: Trip, activities: Iterable[Activity]) -> BudgetSummary:
    """Summarize spending against the trip budget.

    Only paid activities count towards spending. Activities without a cost
    category are grouped as "uncategorized".
    """
    spending_by_category: dict[str, float] = {}
    total_spent = 0.0

    for activity in activities:
        if not activity.is_paid:
            continue
        share = activity_share(activity)
        total_spent += share
        category = (activity.cost_category or CostCategory.uncategorized).value
        spending_by_category[category] = spending_by_category.get(category, 0.0) + share

    budget = trip.budget or 0.0
    percent_used = (total_spent / budget) * 100 if budget else 0.0

    return BudgetSummary(
        trip_id=trip.id,
        budget=budget,
        currency=trip.currency,
        total_spent=round(total_spent, 2),
        remaining=round(budget - total_spent, 2),
        percent_used=round(percent_used, 2),
        alert_threshold=trip.budget_alert_threshold,
        spending_by_category={k: round(v, 2) for k, v in spending_by_category.items()},
        budget_categories=dict(trip.budget_categories),
        start_date=trip.start_date,
        end_date=trip.end_date,
    )
