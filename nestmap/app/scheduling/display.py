"""Display derivations for itinerary views."""

from datetime import date

TIME_PLACEHOLDER = "--:--"


def format_time(raw: str | None) -> str:
    """Convert a 24-hour "HH:MM" string to 12-hour display form.

    Malformed values are returned unchanged; missing values become the
    "--:--" placeholder.

    Examples:
        "00:00" -> "12:00 AM", "13:30" -> "1:30 PM", "garbage" -> "garbage"
    """
    if raw is None or not raw.strip():
        return TIME_PLACEHOLDER

    parts = raw.split(":")
    if len(parts) < 2:
        return raw

    try:
        hour = int(parts[0])
    except ValueError:
        return raw

    minutes = parts[1] or "00"
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {period}"


def format_day_label(day_number: int, day: date) -> str:
    """Label used by the day selector, e.g. "Day 1 - Jun 1"."""
    return f"Day {day_number} - {day.strftime('%b')} {day.day}"
