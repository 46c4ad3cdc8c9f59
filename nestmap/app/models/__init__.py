"""Models package - re-exports for convenience."""

from nestmap.app.models.activity import Activity
from nestmap.app.models.budget import BudgetSummary
from nestmap.app.models.common import (
    ActivityTag,
    CostCategory,
    Geo,
    TravelIcon,
    TravelMode,
)
from nestmap.app.models.schedule import (
    DaySchedule,
    ScheduledActivity,
    ScheduleWarning,
    TripSchedule,
    WarningKind,
    WarningSeverity,
)
from nestmap.app.models.trip import EntityId, Todo, Trip

__all__ = [
    # Common
    "Geo",
    "TravelMode",
    "TravelIcon",
    "ActivityTag",
    "CostCategory",
    # Trip
    "EntityId",
    "Trip",
    "Todo",
    # Activity
    "Activity",
    # Schedule
    "TripSchedule",
    "DaySchedule",
    "ScheduledActivity",
    "ScheduleWarning",
    "WarningKind",
    "WarningSeverity",
    # Budget
    "BudgetSummary",
]
