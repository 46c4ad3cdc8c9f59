"""Intra-day ordering of activities."""

from collections.abc import Iterable

from nestmap.app.models.activity import Activity


def sort_day(activities: Iterable[Activity], *, tie_break_by_order: bool = False) -> list[Activity]:
    """Sort a day's activities by their "HH:MM" time string.

    Times are zero-padded, so string order is chronological order. The sort
    is stable: activities sharing a time keep their input order unless
    tie_break_by_order makes the manual `order` hint the secondary key.
    Activities without a time sort first.
    """
    if tie_break_by_order:
        return sorted(activities, key=lambda a: (a.time or "", a.order))
    return sorted(activities, key=lambda a: a.time or "")
