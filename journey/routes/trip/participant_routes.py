from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status

from journey.dependencies.services import get_trip_service
from journey.schemas.error import ErrorResponse
from journey.schemas.trip.participant import ParticipantListResponse
from journey.services.trips.trip_service import TripService

router = APIRouter(tags=["Participants"], responses={400: {"model": ErrorResponse}})


@router.patch(
    "/participants/{participant_id}/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def confirm_participant_route(
    participant_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    await trip_service.confirm_participant(participant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/trips/{trip_id}/invites",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
)
async def invite_participant_route(
    trip_id: str,
    payload: Dict[str, Any] = Body(...),
    trip_service: TripService = Depends(get_trip_service)
):
    await trip_service.invite_participant(trip_id, payload)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/trips/{trip_id}/participants", response_model=ParticipantListResponse)
async def list_participants_route(
    trip_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.list_participants(trip_id)
