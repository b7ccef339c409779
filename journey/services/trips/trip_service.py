import functools
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel

from journey.core.background import spawn_detached
from journey.core.errors import AlreadyConfirmed, InvalidInput, NotFound, StorageFailure
from journey.core.logger import logger
from journey.core.validation import InputValidator
from journey.repositories.records import (
    NewActivity,
    NewLink,
    NewParticipant,
    NewTrip,
    TripChanges,
    TripRecord,
)
from journey.repositories.trip_repository import TripRepository
from journey.schemas.trip.activity import (
    ActivityCreate,
    ActivityDay,
    ActivityListResponse,
    ActivityOut,
)
from journey.schemas.trip.link import LinkCreate, LinkListResponse, LinkOut
from journey.schemas.trip.participant import (
    ParticipantInvite,
    ParticipantListResponse,
    ParticipantOut,
)
from journey.schemas.trip.trip_schema import TripCreate, TripDetails, TripUpdate
from journey.services.notifier import Notifier

ModelT = TypeVar("ModelT", bound=BaseModel)
Payload = Union[Mapping[str, Any], BaseModel]


def parse_id(raw: Union[str, UUID]) -> UUID:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        raise InvalidInput("uuid invalid") from None


@contextmanager
def storage_errors(action: str, message: Optional[str] = None) -> Iterator[None]:
    """Log a StorageFailure with its context, optionally replacing the client message."""
    try:
        yield
    except StorageFailure as e:
        logger.error(f"Failed to {action} (operation={e.operation})")
        if message:
            raise StorageFailure(e.operation, message) from e
        raise


def _trip_details(trip: TripRecord) -> TripDetails:
    return TripDetails(
        id=str(trip.id),
        destination=trip.destination,
        starts_at=trip.starts_at,
        ends_at=trip.ends_at,
        is_confirmed=trip.is_confirmed,
    )


class TripService:
    """
    Trip lifecycle and confirmation workflow.

    Holds no state of its own: every read and write goes through the
    repository, and every multi-row write runs inside ``repository.atomic()``.
    Emails are handed to detached tasks and never delay or fail a call.
    """

    def __init__(self, repository: TripRepository, notifier: Notifier, validator: InputValidator):
        self.repository = repository
        self.notifier = notifier
        self.validator = validator

    def _validate(self, schema: Type[ModelT], payload: Payload) -> ModelT:
        result = self.validator.validate(schema, payload)
        if not result.ok:
            raise InvalidInput("invalid input: " + "; ".join(result.violations), result.violations)
        return result.value

    async def _require_trip(self, trip_id: UUID) -> TripRecord:
        with storage_errors(f"get trip {trip_id}"):
            trip = await self.repository.get_trip(trip_id)
        if not trip:
            logger.warning(f"Trip not found: ID {trip_id}")
            raise NotFound("trip not found")
        return trip

    async def create_trip(self, payload: Payload) -> UUID:
        data = self._validate(TripCreate, payload)

        owner_email = data.owner_email.lower()
        invitees: List[str] = []
        for email in data.emails_to_invite:
            email = email.lower()
            if email != owner_email and email not in invitees:
                invitees.append(email)

        with storage_errors(f"create trip to {data.destination}", "failed to create trip, try again"):
            async with self.repository.atomic():
                trip_id = await self.repository.create_trip(
                    NewTrip(
                        destination=data.destination,
                        starts_at=data.starts_at,
                        ends_at=data.ends_at,
                        owner_name=data.owner_name,
                        owner_email=owner_email,
                    )
                )
                participants = [NewParticipant(trip_id=trip_id, email=email) for email in invitees]
                participants.append(
                    NewParticipant(
                        trip_id=trip_id,
                        email=owner_email,
                        name=data.owner_name,
                        is_owner=True,
                    )
                )
                await self.repository.invite_participants_to_trip(participants)

        logger.info(f"Trip {trip_id} created by {owner_email} with {len(invitees)} invitee(s)")

        spawn_detached(
            functools.partial(self.notifier.send_confirm_trip_email_to_trip_owner, trip_id),
            f"confirmation email for trip {trip_id}",
        )
        return trip_id

    async def get_trip(self, trip_id: Union[str, UUID]) -> TripDetails:
        trip = await self._require_trip(parse_id(trip_id))
        return _trip_details(trip)

    async def update_trip(self, trip_id: Union[str, UUID], payload: Payload) -> TripDetails:
        trip_id = parse_id(trip_id)
        await self._require_trip(trip_id)

        data = self._validate(TripUpdate, payload)
        if data.trip_id is not None and data.trip_id != trip_id:
            raise InvalidInput("trip id mismatch")

        with storage_errors(f"update trip {trip_id}", "failed to update trip, try again"):
            trip = await self.repository.update_trip(
                TripChanges(
                    id=trip_id,
                    destination=data.destination,
                    starts_at=data.starts_at,
                    ends_at=data.ends_at,
                )
            )
        if not trip:
            raise NotFound("trip not found")

        logger.info(f"Trip {trip_id} updated")
        return _trip_details(trip)

    async def confirm_trip(self, trip_id: Union[str, UUID]) -> None:
        trip_id = parse_id(trip_id)
        trip = await self._require_trip(trip_id)
        if trip.is_confirmed:
            raise AlreadyConfirmed("trip already confirmed")

        # A failed participant read rolls the confirmation back
        with storage_errors(f"confirm trip {trip_id}", "failed to confirm trip, try again"):
            async with self.repository.atomic():
                confirmed = await self.repository.confirm_trip(trip_id)
                participants = await self.repository.get_participants(trip_id) if confirmed else []
        if not confirmed:
            raise AlreadyConfirmed("trip already confirmed")

        logger.info(f"Trip {trip_id} confirmed, inviting {len(participants)} participant(s)")

        for participant in participants:
            spawn_detached(
                functools.partial(self.notifier.send_trip_invite_email, trip_id, participant.id),
                f"invite email to participant {participant.id} of trip {trip_id}",
            )

    async def confirm_participant(self, participant_id: Union[str, UUID]) -> None:
        participant_id = parse_id(participant_id)

        with storage_errors(f"get participant {participant_id}"):
            participant = await self.repository.get_participant(participant_id)
        if not participant:
            logger.warning(f"Participant not found: ID {participant_id}")
            raise NotFound("participant not found")

        if participant.is_confirmed:
            raise AlreadyConfirmed("participant already confirmed")

        with storage_errors(f"confirm participant {participant_id}"):
            confirmed = await self.repository.confirm_participant(participant_id)
        if not confirmed:
            raise AlreadyConfirmed("participant already confirmed")

        logger.info(f"Participant {participant_id} confirmed on trip {participant.trip_id}")

    async def invite_participant(self, trip_id: Union[str, UUID], payload: Payload) -> int:
        trip_id = parse_id(trip_id)
        trip = await self._require_trip(trip_id)
        data = self._validate(ParticipantInvite, payload)

        participant = NewParticipant(trip_id=trip_id, email=data.email.lower(), name=data.name)
        with storage_errors(f"get participants of trip {trip_id}"):
            existing = await self.repository.get_participants(trip_id)
        if any(p.email == participant.email for p in existing):
            raise InvalidInput("participant already invited")

        with storage_errors(f"invite {participant.email} to trip {trip_id}", "failed to invite participant, try again"):
            count = await self.repository.invite_participants_to_trip([participant])

        logger.info(f"{participant.email} invited to trip {trip_id}")

        # Invitations for a confirmed trip have already gone out, send this one now
        if trip.is_confirmed:
            spawn_detached(
                functools.partial(self.notifier.send_trip_invite_email, trip_id, participant.id),
                f"invite email to participant {participant.id} of trip {trip_id}",
            )
        return count

    async def create_activity(self, trip_id: Union[str, UUID], payload: Payload) -> UUID:
        trip_id = parse_id(trip_id)
        await self._require_trip(trip_id)
        data = self._validate(ActivityCreate, payload)

        with storage_errors(f"create activity on trip {trip_id}", "failed to create an activity, try again"):
            activity_id = await self.repository.create_activity(
                NewActivity(trip_id=trip_id, title=data.title, occurs_at=data.occurs_at)
            )
        return activity_id

    async def list_activities(self, trip_id: Union[str, UUID]) -> ActivityListResponse:
        trip_id = parse_id(trip_id)
        trip = await self._require_trip(trip_id)

        with storage_errors(f"get activities of trip {trip_id}"):
            activities = await self.repository.get_trip_activities(trip_id)

        # Activities carry no day of their own, so one bucket at the trip start
        return ActivityListResponse(
            activities=[
                ActivityDay(
                    date=trip.starts_at,
                    activities=[
                        ActivityOut(id=str(a.id), title=a.title, occurs_at=a.occurs_at)
                        for a in activities
                    ],
                )
            ]
        )

    async def create_link(self, trip_id: Union[str, UUID], payload: Payload) -> UUID:
        trip_id = parse_id(trip_id)
        await self._require_trip(trip_id)
        data = self._validate(LinkCreate, payload)

        with storage_errors(f"create link on trip {trip_id}", "failed to create a link, try again"):
            link_id = await self.repository.create_trip_link(
                NewLink(trip_id=trip_id, title=data.title, url=data.url)
            )
        return link_id

    async def list_links(self, trip_id: Union[str, UUID]) -> LinkListResponse:
        trip_id = parse_id(trip_id)
        await self._require_trip(trip_id)

        with storage_errors(f"get links of trip {trip_id}"):
            links = await self.repository.get_trip_links(trip_id)

        return LinkListResponse(
            links=[LinkOut(id=str(link.id), title=link.title, url=link.url) for link in links]
        )

    async def list_participants(self, trip_id: Union[str, UUID]) -> ParticipantListResponse:
        trip_id = parse_id(trip_id)
        await self._require_trip(trip_id)

        with storage_errors(f"get participants of trip {trip_id}"):
            participants = await self.repository.get_participants(trip_id)

        return ParticipantListResponse(
            participants=[
                ParticipantOut(
                    id=str(p.id),
                    name=p.name,
                    email=p.email,
                    is_confirmed=p.is_confirmed,
                    is_owner=p.is_owner,
                )
                for p in participants
            ]
        )
