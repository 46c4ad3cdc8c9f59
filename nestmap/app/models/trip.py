"""Trip and todo models - owned by the external trip store."""

from datetime import date, timedelta
from typing import Annotated

from pydantic import AliasChoices, Field, ValidationInfo, computed_field, field_validator

from nestmap.app.models.common import CamelModel

EntityId = int | str


class Trip(CamelModel):
    """Top-level container with an inclusive date range."""

    id: EntityId
    title: str = ""
    start_date: date
    end_date: date
    completed: bool = False

    # Budget tracking
    budget: Annotated[float, Field(ge=0)] | None = None
    currency: str = "USD"
    budget_alert_threshold: Annotated[float, Field(gt=0, le=100)] = 80
    budget_categories: dict[str, float] = Field(default_factory=dict)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def strip_time_of_day(cls, v: object) -> object:
        """Accept ISO timestamps from the store by keeping only the calendar date."""
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @field_validator("end_date")
    @classmethod
    def validate_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        """Ensure end >= start."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must be >= start_date")
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def days(self) -> list[date]:
        """Ordered calendar days from start_date to end_date (inclusive)."""
        span = (self.end_date - self.start_date).days
        return [self.start_date + timedelta(days=offset) for offset in range(span + 1)]


class Todo(CamelModel):
    """Checklist item attached to a trip."""

    id: EntityId
    trip_id: EntityId
    task: str = Field("", validation_alias=AliasChoices("task", "content"))
    completed: bool = Field(
        False, validation_alias=AliasChoices("completed", "is_completed", "isCompleted")
    )
    assigned_to: str | None = None

    @field_validator("completed", mode="before")
    @classmethod
    def null_is_not_completed(cls, v: object) -> object:
        return False if v is None else v
