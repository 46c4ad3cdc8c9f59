"""Budget models - spending summary derived from activity costs."""

from datetime import date

from pydantic import Field, computed_field

from nestmap.app.models.common import CamelModel
from nestmap.app.models.trip import EntityId


class BudgetSummary(CamelModel):
    """Budget usage for a trip."""

    trip_id: EntityId
    budget: float
    currency: str
    total_spent: float
    remaining: float
    percent_used: float
    alert_threshold: float
    spending_by_category: dict[str, float] = Field(default_factory=dict)
    budget_categories: dict[str, float] = Field(default_factory=dict)
    start_date: date
    end_date: date

    @computed_field  # type: ignore[prop-decorator]
    @property
    def over_threshold(self) -> bool:
        """True once spending reaches the alert threshold."""
        return self.budget > 0 and self.percent_used >= self.alert_threshold

    @computed_field  # type: ignore[prop-decorator]
    @property
    def over_budget(self) -> bool:
        return self.budget > 0 and self.percent_used >= 100
