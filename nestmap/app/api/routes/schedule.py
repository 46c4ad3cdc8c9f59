"""Schedule endpoint - POST /schedule computes a schedule from a payload."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nestmap.app.api.deps import get_schedule_policy
from nestmap.app.models.activity import Activity
from nestmap.app.models.schedule import TripSchedule
from nestmap.app.models.trip import Trip
from nestmap.app.scheduling.scheduler import SchedulePolicy, build_trip_schedule

router = APIRouter(tags=["schedule"])


class ScheduleRequest(BaseModel):
    """Request body for POST /schedule."""

    trip: Trip
    activities: list[Activity] = Field(default_factory=list)


@router.post("/schedule", response_model=TripSchedule)
async def schedule(
    request: ScheduleRequest,
    policy: Annotated[SchedulePolicy, Depends(get_schedule_policy)],
) -> TripSchedule:
    """Compute the day-by-day schedule for the given trip and activities.

    Pure computation: nothing is read from or written to the trip store.
    """
    return build_trip_schedule(request.trip, request.activities, policy)
