"""Schedule models - derived day views, never persisted."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import Field, computed_field

from nestmap.app.models.activity import Activity
from nestmap.app.models.common import CamelModel, TravelIcon
from nestmap.app.models.trip import EntityId


class WarningKind(str, Enum):
    """Categories of schedule warnings."""

    TIME_CONFLICT = "time_conflict"
    TRAVEL_TIME = "travel_time"


class WarningSeverity(str, Enum):
    """How prominently a warning should be displayed."""

    HIGH = "high"
    LOW = "low"


class ScheduleWarning(CamelModel):
    """A conflict detected while scheduling a day."""

    kind: WarningKind
    code: str  # Machine-usable short code, e.g., "TIME_CONFLICT"
    message: str
    severity: WarningSeverity
    details: dict[str, Any] = Field(default_factory=dict)


class ScheduledActivity(Activity):
    """Activity view-model with the fields derived for one day."""

    display_time: str
    time_conflict: bool = False
    travel_minutes: int | None = None
    travel_icon: TravelIcon = TravelIcon.unknown
    warnings: list[ScheduleWarning] = Field(default_factory=list)


class DaySchedule(CamelModel):
    """Sorted activities for a single calendar day of a trip."""

    date: date
    day_number: int = Field(..., ge=1)
    label: str
    activities: list[ScheduledActivity] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_activities(self) -> bool:
        return bool(self.activities)


class TripSchedule(CamelModel):
    """Complete day-by-day schedule for a trip."""

    trip_id: EntityId
    days: list[DaySchedule]
    unscheduled: list[Activity] = Field(default_factory=list)
    time_conflict_count: int = 0
    travel_conflict_count: int = 0

    def day(self, day: date) -> DaySchedule | None:
        """Find the schedule for a calendar day, if it is part of the trip."""
        for day_schedule in self.days:
            if day_schedule.date == day:
                return day_schedule
        return None
