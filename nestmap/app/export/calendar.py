"""iCalendar export of a trip schedule.

Start/end are recomputed from each activity's date and time with a fixed
duration; conflict flags from the schedule are not used. Activities whose
time is not a valid 24-hour "HH:MM" become all-day events.
"""

from datetime import date, datetime, time, timedelta, timezone

from pydantic import BaseModel

from nestmap.app.models.common import Geo
from nestmap.app.models.schedule import TripSchedule
from nestmap.app.models.trip import Trip

DEFAULT_DURATION_MIN = 120
DEFAULT_PRODID = "-//NestMap//Itinerary Export//EN"

_MAX_LINE_OCTETS = 75


class CalendarEvent(BaseModel):
    """One VEVENT derived from an activity."""

    uid: str
    start: datetime | date
    end: datetime | date
    all_day: bool
    summary: str
    location: str | None = None
    description: str | None = None
    geo: Geo | None = None


def parse_clock(raw: str | None) -> tuple[int, int] | None:
    """Strictly parse "HH:MM" (24-hour); None when not a valid clock time."""
    if not raw:
        return None
    parts = raw.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def build_calendar_events(
    trip: Trip,
    schedule: TripSchedule,
    *,
    duration_min: int = DEFAULT_DURATION_MIN,
) -> list[CalendarEvent]:
    """Convert scheduled activities into calendar events in day order.

    Args:
        trip: Trip the schedule belongs to
        schedule: Output of build_trip_schedule
        duration_min: Fixed event duration in minutes

    Returns:
        Events for every activity that was associated to a trip day
    """
    events: list[CalendarEvent] = []

    for day in schedule.days:
        for activity in day.activities:
            clock = parse_clock(activity.time)
            if clock is None:
                start: datetime | date = day.date
                end: datetime | date = day.date + timedelta(days=1)
            else:
                start = datetime.combine(day.date, time(clock[0], clock[1]))
                end = start + timedelta(minutes=duration_min)

            events.append(
                CalendarEvent(
                    uid=f"activity-{activity.id}-trip-{trip.id}@nestmap",
                    start=start,
                    end=end,
                    all_day=clock is None,
                    summary=activity.title,
                    location=activity.location_name,
                    description=activity.notes,
                    geo=activity.geo,
                )
            )

    return events


def escape_text(value: str) -> str:
    """Escape a TEXT property value (RFC 5545 section 3.3.11)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets, continuation lines start with a space."""
    encoded = line.encode("utf-8")
    if len(encoded) <= _MAX_LINE_OCTETS:
        return line

    chunks: list[str] = []
    current = ""
    limit = _MAX_LINE_OCTETS
    for char in line:
        if len((current + char).encode("utf-8")) > limit:
            chunks.append(current)
            current = char
            limit = _MAX_LINE_OCTETS - 1  # room for the leading space
        else:
            current += char
    chunks.append(current)
    return "\r\n ".join(chunks)


def _format_value(value: datetime | date) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y%m%dT%H%M%S")
    return value.strftime("%Y%m%d")


def render_ics(
    events: list[CalendarEvent],
    *,
    calendar_name: str,
    now: datetime | None = None,
    prodid: str = DEFAULT_PRODID,
) -> str:
    """Render events as an iCalendar document with CRLF line endings.

    Args:
        events: Events from build_calendar_events
        calendar_name: Shown by clients as the calendar title
        now: DTSTAMP value (for testing); defaults to current UTC time
        prodid: PRODID property
    """
    if now is None:
        now = datetime.now(timezone.utc)
    dtstamp = now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{prodid}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{escape_text(calendar_name)}",
    ]

    for event in events:
        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{event.uid}")
        lines.append(f"DTSTAMP:{dtstamp}")
        if event.all_day:
            lines.append(f"DTSTART;VALUE=DATE:{_format_value(event.start)}")
            lines.append(f"DTEND;VALUE=DATE:{_format_value(event.end)}")
        else:
            lines.append(f"DTSTART:{_format_value(event.start)}")
            lines.append(f"DTEND:{_format_value(event.end)}")
        lines.append(f"SUMMARY:{escape_text(event.summary)}")
        if event.location:
            lines.append(f"LOCATION:{escape_text(event.location)}")
        if event.description:
            lines.append(f"DESCRIPTION:{escape_text(event.description)}")
        if event.geo is not None:
            lines.append(f"GEO:{event.geo.lat};{event.geo.lon}")
        lines.append("STATUS:CONFIRMED")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")
    return "\r\n".join(fold_line(line) for line in lines) + "\r\n"
