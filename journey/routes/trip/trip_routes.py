from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status

from journey.dependencies.services import get_trip_service
from journey.schemas.error import ErrorResponse
from journey.schemas.trip.trip_schema import TripCreateResponse, TripDetailsResponse
from journey.services.trips.trip_service import TripService

router = APIRouter(
    prefix="/trips",
    tags=["Trips"],
    responses={400: {"model": ErrorResponse}},
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TripCreateResponse)
async def create_trip_route(
    payload: Dict[str, Any] = Body(...),
    trip_service: TripService = Depends(get_trip_service)
):
    trip_id = await trip_service.create_trip(payload)
    return TripCreateResponse(trip_id=str(trip_id))


@router.get("/{trip_id}", response_model=TripDetailsResponse)
async def get_trip_route(
    trip_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    return TripDetailsResponse(trip=await trip_service.get_trip(trip_id))


@router.put("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_trip_route(
    trip_id: str,
    payload: Dict[str, Any] = Body(...),
    trip_service: TripService = Depends(get_trip_service)
):
    await trip_service.update_trip(trip_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{trip_id}/confirm", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def confirm_trip_route(
    trip_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    await trip_service.confirm_trip(trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
