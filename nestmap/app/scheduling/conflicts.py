"""Conflict detection for a single day's sorted activities.

Two independent checks:
1. Time conflicts - activities sharing the exact same "HH:MM" string
2. Travel conflicts - excessive travel time from the previous activity

Neither check raises on malformed data; missing values simply mean no flag.
"""

import re
from collections import Counter
from collections.abc import Sequence

from nestmap.app.models.activity import Activity
from nestmap.app.models.common import TravelIcon, TravelMode
from nestmap.app.models.schedule import ScheduleWarning, WarningKind, WarningSeverity

TIME_CONFLICT_MESSAGE = "TIME CONFLICT: Another activity is scheduled at the same time!"
TRAVEL_CONFLICT_MESSAGE = "Travel time may be too long"

# A number with an optional unit. A unit may run straight into the next
# part ("2h30m"); a bare number may not be followed by a digit or a word.
_DURATION_PART = re.compile(
    r"(?<![\d.])(\d+(?:\.\d+)?)"
    r"(?:\s*(hours?|hrs?|h|minutes?|mins?|m)(?![a-z])|(?![\d.]|\s*[a-z]))",
    re.IGNORECASE,
)

_ICONS = {
    TravelMode.walking: TravelIcon.walking,
    TravelMode.driving: TravelIcon.driving,
    TravelMode.transit: TravelIcon.transit,
}


def find_time_conflicts(activities: Sequence[Activity]) -> set[int]:
    """Indexes of activities that share their time with another activity.

    Comparison is exact string equality on non-empty times. The result is
    symmetric: every member of a same-time group is included.
    """
    counts = Counter(a.time for a in activities if a.time)
    return {i for i, a in enumerate(activities) if a.time and counts[a.time] > 1}


def parse_travel_minutes(value: str | None) -> int | None:
    """Parse a travel duration such as "15 min", "1 hr 20 min" or "2h30m" into minutes.

    Bare numbers are minutes. Returns None for missing, zero or unparseable
    durations.
    """
    if not value or not value.strip():
        return None

    parts = _DURATION_PART.findall(value)
    if not parts:
        return None

    total = 0.0
    for amount, unit in parts:
        if unit.lower().startswith("h"):
            total += float(amount) * 60
        else:
            total += float(amount)

    minutes = round(total)
    return minutes if minutes > 0 else None


def _is_zero_duration(value: str) -> bool:
    parts = _DURATION_PART.findall(value)
    return bool(parts) and all(float(amount) == 0 for amount, _ in parts)


def is_travel_conflict(
    activity: Activity, position: int, threshold_min: int
) -> tuple[bool, int | None]:
    """Decide whether the travel leg into an activity is flagged.

    A leg with an absent or zero travel time is never flagged. Otherwise the
    routing service's own `conflict` flag is kept as is, whatever the
    position or whether the duration parses, and the local threshold check
    is added for parsed durations of every activity but the first of its day.

    Args:
        activity: Activity at `position` in its day's sorted list
        position: 0-based index within the day
        threshold_min: Minutes above which travel is flagged

    Returns:
        (conflict, travel_minutes)
    """
    raw = activity.travel_time_from_previous
    if not raw or not raw.strip() or _is_zero_duration(raw):
        return (False, None)

    minutes = parse_travel_minutes(raw)
    over_threshold = position > 0 and minutes is not None and minutes > threshold_min
    return (activity.conflict or over_threshold, minutes)


def travel_icon(mode: TravelMode | str | None) -> TravelIcon:
    """Icon for a travel mode; anything unrecognized gets the default icon."""
    return _ICONS.get(TravelMode.parse(mode), TravelIcon.unknown)  # type: ignore[arg-type]


def time_conflict_warning(activity: Activity) -> ScheduleWarning:
    return ScheduleWarning(
        kind=WarningKind.TIME_CONFLICT,
        code="TIME_CONFLICT",
        message=TIME_CONFLICT_MESSAGE,
        severity=WarningSeverity.HIGH,
        details={"time": activity.time},
    )


def travel_conflict_warning(
    activity: Activity, minutes: int | None, threshold_min: int
) -> ScheduleWarning:
    return ScheduleWarning(
        kind=WarningKind.TRAVEL_TIME,
        code="TRAVEL_TIME_EXCEEDED",
        message=TRAVEL_CONFLICT_MESSAGE,
        severity=WarningSeverity.LOW,
        details={
            "travel_minutes": minutes,
            "threshold_minutes": threshold_min,
            "travel_mode": activity.travel_mode.value,
            "flagged_upstream": activity.conflict,
        },
    )
