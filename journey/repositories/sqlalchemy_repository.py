import functools
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from journey.core.errors import StorageFailure
from journey.core.logger import logger
from journey.models.trips.activity import Activity
from journey.models.trips.link import Link
from journey.models.trips.participant import Participant
from journey.models.trips.trip_model import Trip
from journey.repositories.records import (
    ActivityRecord,
    LinkRecord,
    NewActivity,
    NewLink,
    NewParticipant,
    NewTrip,
    ParticipantRecord,
    TripChanges,
    TripRecord,
)


def storage_operation(name: str):
    """Translate SQLAlchemy errors raised by a repository method into StorageFailure."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self: "SqlAlchemyTripRepository", *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"Storage operation '{name}' failed: {e}")
                if not self._in_atomic:
                    await self.session.rollback()
                raise StorageFailure(name) from e

        return wrapper

    return decorator


class SqlAlchemyTripRepository:
    """TripRepository backed by one request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._in_atomic = False

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        # Nested blocks join the outermost unit of work
        if self._in_atomic:
            yield
            return

        self._in_atomic = True
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to commit unit of work: {e}")
            await self.session.rollback()
            raise StorageFailure("commit") from e
        except BaseException:
            await self.session.rollback()
            raise
        finally:
            self._in_atomic = False

    async def _save(self) -> None:
        if self._in_atomic:
            await self.session.flush()
        else:
            await self.session.commit()

    @storage_operation("create_trip")
    async def create_trip(self, params: NewTrip) -> UUID:
        trip = Trip(id=uuid.uuid4(), is_confirmed=False, **params.model_dump())
        self.session.add(trip)
        await self._save()
        return trip.id

    @storage_operation("get_trip")
    async def get_trip(self, trip_id: UUID) -> Optional[TripRecord]:
        result = await self.session.execute(select(Trip).where(Trip.id == trip_id))
        trip = result.scalar_one_or_none()
        return TripRecord.model_validate(trip) if trip else None

    @storage_operation("update_trip")
    async def update_trip(self, params: TripChanges) -> Optional[TripRecord]:
        result = await self.session.execute(select(Trip).where(Trip.id == params.id))
        trip = result.scalar_one_or_none()
        if not trip:
            return None

        trip.destination = params.destination
        trip.starts_at = params.starts_at
        trip.ends_at = params.ends_at

        await self._save()
        return TripRecord.model_validate(trip)

    @storage_operation("confirm_trip")
    async def confirm_trip(self, trip_id: UUID) -> bool:
        # Conditional on the flag so only one of two racing calls flips it
        result = await self.session.execute(
            update(Trip)
            .where(Trip.id == trip_id, Trip.is_confirmed.is_(False))
            .values(is_confirmed=True)
        )
        await self._save()
        return result.rowcount == 1

    @storage_operation("get_participant")
    async def get_participant(self, participant_id: UUID) -> Optional[ParticipantRecord]:
        result = await self.session.execute(
            select(Participant).where(Participant.id == participant_id)
        )
        participant = result.scalar_one_or_none()
        return ParticipantRecord.model_validate(participant) if participant else None

    @storage_operation("get_participants")
    async def get_participants(self, trip_id: UUID) -> List[ParticipantRecord]:
        result = await self.session.execute(
            select(Participant)
            .where(Participant.trip_id == trip_id)
            .order_by(Participant.is_owner.desc(), Participant.email)
        )
        return [ParticipantRecord.model_validate(p) for p in result.scalars().all()]

    @storage_operation("confirm_participant")
    async def confirm_participant(self, participant_id: UUID) -> bool:
        result = await self.session.execute(
            update(Participant)
            .where(Participant.id == participant_id, Participant.is_confirmed.is_(False))
            .values(is_confirmed=True)
        )
        await self._save()
        return result.rowcount == 1

    @storage_operation("invite_participants_to_trip")
    async def invite_participants_to_trip(self, params: Sequence[NewParticipant]) -> int:
        async with self.atomic():
            self.session.add_all(
                [Participant(**p.model_dump()) for p in params]
            )
            await self.session.flush()
        return len(params)

    @storage_operation("create_activity")
    async def create_activity(self, params: NewActivity) -> UUID:
        activity = Activity(id=uuid.uuid4(), **params.model_dump())
        self.session.add(activity)
        await self._save()
        return activity.id

    @storage_operation("get_trip_activities")
    async def get_trip_activities(self, trip_id: UUID) -> List[ActivityRecord]:
        result = await self.session.execute(
            select(Activity)
            .where(Activity.trip_id == trip_id)
            .order_by(Activity.occurs_at)
        )
        return [ActivityRecord.model_validate(a) for a in result.scalars().all()]

    @storage_operation("create_trip_link")
    async def create_trip_link(self, params: NewLink) -> UUID:
        link = Link(id=uuid.uuid4(), **params.model_dump())
        self.session.add(link)
        await self._save()
        return link.id

    @storage_operation("get_trip_links")
    async def get_trip_links(self, trip_id: UUID) -> List[LinkRecord]:
        result = await self.session.execute(
            select(Link).where(Link.trip_id == trip_id).order_by(Link.title)
        )
        return [LinkRecord.model_validate(link) for link in result.scalars().all()]
