"""Day bucketing - partition a trip's activities by calendar day."""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from nestmap.app.models.activity import Activity


def trip_days(start: date, end: date) -> list[date]:
    """Ordered calendar days from start to end (inclusive).

    Returns an empty list when end precedes start.
    """
    span = (end - start).days
    return [start + timedelta(days=offset) for offset in range(span + 1)]


def bucket_by_day(
    days: Sequence[date], activities: Iterable[Activity]
) -> tuple[dict[date, list[Activity]], list[Activity]]:
    """Group activities under the trip day matching their calendar date.

    Args:
        days: Trip day sequence
        activities: Flat activity list, in store order

    Returns:
        (buckets, unscheduled) where buckets has a key for every day (empty
        list for days without activities) and keeps input order within a day,
        and unscheduled holds activities with no date or a date outside days.
    """
    buckets: dict[date, list[Activity]] = {day: [] for day in days}
    unscheduled: list[Activity] = []

    for activity in activities:
        if activity.date is not None and activity.date in buckets:
            buckets[activity.date].append(activity)
        else:
            unscheduled.append(activity)

    return buckets, unscheduled
