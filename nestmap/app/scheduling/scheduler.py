"""Itinerary scheduler - trip days + activities -> day-by-day schedule.

Pipeline (pure, re-run on every request, nothing persisted):
1. Trip day sequence
2. Bucket activities by calendar day
3. Sort each day by time
4. Derive display time, travel icon and conflict flags
"""

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from nestmap.app.config import Settings, get_settings
from nestmap.app.models.activity import Activity
from nestmap.app.models.schedule import DaySchedule, ScheduledActivity, TripSchedule
from nestmap.app.models.trip import Trip
from nestmap.app.scheduling.conflicts import (
    find_time_conflicts,
    is_travel_conflict,
    time_conflict_warning,
    travel_conflict_warning,
    travel_icon,
)
from nestmap.app.scheduling.days import bucket_by_day, trip_days
from nestmap.app.scheduling.display import format_day_label, format_time
from nestmap.app.scheduling.ordering import sort_day
from nestmap.app.utils.logging import StructuredScheduleLogger
from nestmap.app.utils.metrics import PrometheusScheduleMetrics

_log = StructuredScheduleLogger()
_metrics = PrometheusScheduleMetrics()


@dataclass(frozen=True)
class SchedulePolicy:
    """Tunable scheduling rules."""

    travel_conflict_threshold_min: int = 60
    tie_break_by_order: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "SchedulePolicy":
        return cls(
            travel_conflict_threshold_min=settings.travel_conflict_threshold_min,
            tie_break_by_order=settings.tie_break_by_order,
        )


def schedule_day(activities: Sequence[Activity], policy: SchedulePolicy) -> list[ScheduledActivity]:
    """Sort one day's activities and attach the derived fields."""
    ordered = sort_day(activities, tie_break_by_order=policy.tie_break_by_order)
    time_conflicts = find_time_conflicts(ordered)
    threshold = policy.travel_conflict_threshold_min

    scheduled: list[ScheduledActivity] = []
    for position, activity in enumerate(ordered):
        has_time_conflict = position in time_conflicts
        has_travel_conflict, minutes = is_travel_conflict(activity, position, threshold)

        warnings = []
        if has_time_conflict:
            warnings.append(time_conflict_warning(activity))
        if has_travel_conflict:
            warnings.append(travel_conflict_warning(activity, minutes, threshold))

        fields = activity.model_dump()
        fields.update(
            display_time=format_time(activity.time),
            time_conflict=has_time_conflict,
            conflict=has_travel_conflict,
            travel_minutes=minutes,
            travel_icon=travel_icon(activity.travel_mode),
            warnings=warnings,
        )
        scheduled.append(ScheduledActivity.model_validate(fields))

    return scheduled


def build_trip_schedule(
    trip: Trip,
    activities: Iterable[Activity],
    policy: SchedulePolicy | None = None,
) -> TripSchedule:
    """Build the day-by-day schedule for a trip.

    Args:
        trip: Trip with its inclusive date range
        activities: Flat activity list from the store
        policy: Scheduling rules (defaults come from settings)

    Returns:
        TripSchedule with one DaySchedule per trip day. Activities outside
        the trip range, or without a usable date, are listed in
        `unscheduled` instead of raising.
    """
    if policy is None:
        policy = SchedulePolicy.from_settings(get_settings())

    started = time.perf_counter()
    activity_list = list(activities)

    days = trip_days(trip.start_date, trip.end_date)
    buckets, unscheduled = bucket_by_day(days, activity_list)

    day_schedules: list[DaySchedule] = []
    for day_number, day in enumerate(days, start=1):
        day_schedules.append(
            DaySchedule(
                date=day,
                day_number=day_number,
                label=format_day_label(day_number, day),
                activities=schedule_day(buckets[day], policy),
            )
        )

    time_conflict_count = sum(
        1 for d in day_schedules for a in d.activities if a.time_conflict
    )
    travel_conflict_count = sum(1 for d in day_schedules for a in d.activities if a.conflict)

    latency_ms = (time.perf_counter() - started) * 1000
    _metrics.record_build(latency_ms, time_conflict_count, travel_conflict_count, len(unscheduled))
    _log.log_build(
        trip_id=trip.id,
        days=len(days),
        activities=len(activity_list),
        time_conflicts=time_conflict_count,
        travel_conflicts=travel_conflict_count,
        unscheduled_ids=[a.id for a in unscheduled],
        latency_ms=latency_ms,
    )

    return TripSchedule(
        trip_id=trip.id,
        days=day_schedules,
        unscheduled=unscheduled,
        time_conflict_count=time_conflict_count,
        travel_conflict_count=travel_conflict_count,
    )
