from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from journey.dependencies.services import get_trip_service
from journey.schemas.error import ErrorResponse
from journey.schemas.trip.link import LinkCreateResponse, LinkListResponse
from journey.services.trips.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["Links"], responses={400: {"model": ErrorResponse}})


@router.post("/{trip_id}/links", status_code=status.HTTP_201_CREATED, response_model=LinkCreateResponse)
async def create_link_route(
    trip_id: str,
    payload: Dict[str, Any] = Body(...),
    trip_service: TripService = Depends(get_trip_service)
):
    link_id = await trip_service.create_link(trip_id, payload)
    return LinkCreateResponse(link_id=str(link_id))


@router.get("/{trip_id}/links", response_model=LinkListResponse)
async def list_links_route(
    trip_id: str,
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.list_links(trip_id)
