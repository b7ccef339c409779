from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from journey.dependencies.services import get_trip_service
from journey.schemas.error import ErrorResponse
from journey.schemas.trip.activity import ActivityCreateResponse, ActivityListResponse
from journey.services.trips.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["Activities"], responses={400: {"model": ErrorResponse}})


@router.post(
    "/{trip_id}/activities",
    status_code=status.HTTP_201_CREATED,
    response_model=ActivityCreateResponse,
)
async def create_activity_route(
    trip_id: str,
    payload: Dict[str, Any] = Body(...),
    trip_service: TripService = Depends(get_trip_service)
):
    activity_id = await trip_service.create_activity(trip_id, payload)
    return ActivityCreateResponse(activity_id=str(activity_id))


@router.get("/{trip_id}/activities", response_model=ActivityListResponse)
async def list_activities_route(
    trip_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.list_activities(trip_id)
