"""Trip endpoints backed by the external trip store.

Store failures surface as 502 (404 for missing resources) and are never
retried; clients resubmit manually.
"""

import datetime as dt
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from nestmap.app.api.deps import get_schedule_policy, get_trip_store
from nestmap.app.budget.summary import summarize_budget
from nestmap.app.clients.errors import TripNotFoundError, TripStoreError
from nestmap.app.clients.trip_store import TripStoreClient
from nestmap.app.config import get_settings
from nestmap.app.export.calendar import build_calendar_events, render_ics
from nestmap.app.models.activity import Activity
from nestmap.app.models.budget import BudgetSummary
from nestmap.app.models.common import ActivityTag, CamelModel, CostCategory, TravelMode
from nestmap.app.models.schedule import DaySchedule, TripSchedule
from nestmap.app.models.trip import Todo, Trip
from nestmap.app.scheduling.scheduler import SchedulePolicy, build_trip_schedule

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ActivityCreateRequest(CamelModel):
    """Request body for POST /trips/{trip_id}/activities."""

    title: str = Field(..., min_length=1, max_length=200)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN, description="24-hour HH:MM")
    location_name: str = Field(..., min_length=1)
    latitude: str | None = None
    longitude: str | None = None
    tag: ActivityTag | None = None
    notes: str | None = None
    order: int = 0
    travel_mode: TravelMode = TravelMode.walking
    travel_time_from_previous: str | None = None
    price: float | None = Field(None, ge=0)
    cost_category: CostCategory | None = None


class ActivityUpdateRequest(CamelModel):
    """Request body for PUT /trips/{trip_id}/activities/{activity_id}."""

    title: str | None = Field(None, min_length=1, max_length=200)
    date: dt.date | None = None
    time: str | None = Field(None, pattern=TIME_PATTERN)
    location_name: str | None = Field(None, min_length=1)
    latitude: str | None = None
    longitude: str | None = None
    tag: ActivityTag | None = None
    notes: str | None = None
    order: int | None = None
    completed: bool | None = None
    travel_mode: TravelMode | None = None
    travel_time_from_previous: str | None = None
    price: float | None = Field(None, ge=0)
    actual_cost: float | None = Field(None, ge=0)
    is_paid: bool | None = None
    cost_category: CostCategory | None = None
    split_between: int | None = Field(None, ge=1)


class TripCompletedRequest(BaseModel):
    """Request body for PUT /trips/{trip_id}/completed."""

    completed: bool


def _http_error(e: TripStoreError) -> HTTPException:
    """Translate a trip store failure into an HTTP error for the caller."""
    if isinstance(e, TripNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Not found in trip store: {e}",
        )

    logger.warning(f"Trip store request failed: {e}")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Trip store unavailable: {e}",
    )


def _store_payload(request: CamelModel, *, partial: bool = False) -> dict[str, Any]:
    if partial:
        return request.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


async def _load_trip(store: TripStoreClient, trip_id: str) -> tuple[Trip, list[Activity]]:
    try:
        trip = await store.get_trip(trip_id)
        activities = await store.list_activities(trip_id)
    except TripStoreError as e:
        raise _http_error(e) from e
    return trip, activities


@router.get("/{trip_id}/schedule", response_model=TripSchedule)
async def get_schedule(
    trip_id: str,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
    policy: Annotated[SchedulePolicy, Depends(get_schedule_policy)],
) -> TripSchedule:
    """Day-by-day schedule for a stored trip."""
    trip, activities = await _load_trip(store, trip_id)
    return build_trip_schedule(trip, activities, policy)


@router.get("/{trip_id}/days/{day}", response_model=DaySchedule)
async def get_day(
    trip_id: str,
    day: dt.date,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
    policy: Annotated[SchedulePolicy, Depends(get_schedule_policy)],
) -> DaySchedule:
    """Schedule for a single day of a stored trip.

    Raises:
        HTTPException: 404 if the day is outside the trip's date range
    """
    trip, activities = await _load_trip(store, trip_id)
    day_schedule = build_trip_schedule(trip, activities, policy).day(day)

    if day_schedule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{day.isoformat()} is not part of trip {trip_id}",
        )

    return day_schedule


@router.get("/{trip_id}/calendar.ics")
async def export_calendar(
    trip_id: str,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
    policy: Annotated[SchedulePolicy, Depends(get_schedule_policy)],
) -> Response:
    """Export the trip's scheduled activities as an iCalendar file."""
    settings = get_settings()
    trip, activities = await _load_trip(store, trip_id)

    schedule = build_trip_schedule(trip, activities, policy)
    events = build_calendar_events(
        trip, schedule, duration_min=settings.calendar_event_duration_min
    )
    ics = render_ics(events, calendar_name=trip.title, prodid=settings.calendar_prodid)

    return Response(
        content=ics,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="trip-{trip_id}.ics"'},
    )


@router.get("/{trip_id}/budget", response_model=BudgetSummary)
async def get_budget(
    trip_id: str,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> BudgetSummary:
    """Budget usage computed from paid activities."""
    trip, activities = await _load_trip(store, trip_id)
    return summarize_budget(trip, activities)


@router.get("/{trip_id}/todos", response_model=list[Todo])
async def list_todos(
    trip_id: str,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> list[Todo]:
    """Todos of a stored trip."""
    try:
        return await store.list_todos(trip_id)
    except TripStoreError as e:
        raise _http_error(e) from e


@router.post("/{trip_id}/activities", response_model=Activity, status_code=status.HTTP_201_CREATED)
async def create_activity(
    trip_id: str,
    request: ActivityCreateRequest,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> Activity:
    """Create an activity in the store and invalidate the cached list."""
    try:
        return await store.create_activity(trip_id, _store_payload(request))
    except TripStoreError as e:
        raise _http_error(e) from e


@router.put("/{trip_id}/activities/{activity_id}", response_model=Activity)
async def update_activity(
    trip_id: str,
    activity_id: str,
    request: ActivityUpdateRequest,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> Activity:
    """Update an activity in the store and invalidate the cached list."""
    try:
        return await store.update_activity(trip_id, activity_id, _store_payload(request, partial=True))
    except TripStoreError as e:
        raise _http_error(e) from e


@router.delete("/{trip_id}/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    trip_id: str,
    activity_id: str,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> Response:
    """Delete an activity in the store and invalidate the cached list."""
    try:
        await store.delete_activity(trip_id, activity_id)
    except TripStoreError as e:
        raise _http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{trip_id}/completed", response_model=Trip)
async def set_trip_completed(
    trip_id: str,
    request: TripCompletedRequest,
    store: Annotated[TripStoreClient, Depends(get_trip_store)],
) -> Trip:
    """Toggle the trip's completed flag, independently of its dates."""
    try:
        return await store.set_trip_completed(trip_id, request.completed)
    except TripStoreError as e:
        raise _http_error(e) from e
