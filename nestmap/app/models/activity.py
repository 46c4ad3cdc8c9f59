"""Activity model - a single dated, timed itinerary entry."""

import datetime as dt
from typing import Any

from pydantic import Field, field_validator

from nestmap.app.models.common import ActivityTag, CamelModel, CostCategory, Geo, TravelMode
from nestmap.app.models.trip import EntityId


def coerce_calendar_date(value: Any) -> dt.date | None:
    """Reduce a store date value to its calendar date.

    The store sends plain dates or ISO timestamps; the local calendar date is
    the leading YYYY-MM-DD, whatever the time-of-day or offset. Anything that
    does not parse yields None.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return dt.date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def coerce_optional_number(value: Any) -> float | None:
    """Parse a number or numeric string; garbage yields None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


class Activity(CamelModel):
    """Itinerary entry as returned by the trip store."""

    id: EntityId
    trip_id: EntityId | None = None
    title: str = ""
    date: dt.date | None = None
    time: str | None = None
    location_name: str | None = None
    latitude: str | None = None
    longitude: str | None = None
    tag: ActivityTag | None = None
    notes: str | None = None
    assigned_to: str | None = None
    order: int = 0
    completed: bool = False

    # Travel from the previous activity (pre-computed by the routing service)
    travel_mode: TravelMode = TravelMode.walking
    travel_time_from_previous: str | None = None
    conflict: bool = False

    # Cost tracking
    price: float | None = None
    actual_cost: float | None = None
    is_paid: bool = False
    cost_category: CostCategory | None = None
    split_between: int = Field(1, ge=1)

    # Optional feature flags
    kid_friendly: bool | None = None
    stroller_accessible: bool | None = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> dt.date | None:
        return coerce_calendar_date(v)

    @field_validator("time", "travel_time_from_previous", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        """Numbers sent for time or duration fields are kept as strings."""
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def stringify_coordinate(cls, v: Any) -> str | None:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("travel_mode", mode="before")
    @classmethod
    def parse_travel_mode(cls, v: Any) -> TravelMode:
        return TravelMode.parse(v)  # type: ignore[return-value]

    @field_validator("tag", mode="before")
    @classmethod
    def parse_tag(cls, v: Any) -> ActivityTag | None:
        if v is None or v == "":
            return None
        return ActivityTag.parse(v)  # type: ignore[return-value]

    @field_validator("cost_category", mode="before")
    @classmethod
    def parse_cost_category(cls, v: Any) -> CostCategory | None:
        if v is None or v == "":
            return None
        return CostCategory.parse(v)  # type: ignore[return-value]

    @field_validator("price", "actual_cost", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> float | None:
        return coerce_optional_number(v)

    @field_validator("split_between", mode="before")
    @classmethod
    def parse_split(cls, v: Any) -> int:
        number = coerce_optional_number(v)
        if number is None or number < 1:
            return 1
        return int(number)

    @field_validator("order", mode="before")
    @classmethod
    def parse_order(cls, v: Any) -> int:
        number = coerce_optional_number(v)
        return int(number) if number is not None else 0

    @field_validator("completed", "is_paid", "conflict", mode="before")
    @classmethod
    def null_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def geo(self) -> Geo | None:
        """Coordinates as floats, or None when missing or malformed."""
        lat = coerce_optional_number(self.latitude)
        lon = coerce_optional_number(self.longitude)
        if lat is None or lon is None:
            return None
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            return None
        return Geo(lat=lat, lon=lon)
