"""Shared test fixtures for Journey."""

import copy
import os
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Sequence, Set, Tuple
from uuid import UUID, uuid4

# Configure before any journey module builds settings or the engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["NOTIFICATION_DRAIN_SECONDS"] = "2"

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from journey.core.background import drain_detached_tasks
from journey.core.errors import NotificationFailure, StorageFailure
from journey.core.init_db import init_db
from journey.core.validation import PydanticValidator
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
from journey.services.trips.trip_service import TripService


class InMemoryTripRepository:
    """TripRepository keeping rows in dicts; ``fail_on`` names operations that raise StorageFailure."""

    def __init__(self):
        self.trips: Dict[UUID, TripRecord] = {}
        self.participants: Dict[UUID, ParticipantRecord] = {}
        self.activities: Dict[UUID, ActivityRecord] = {}
        self.links: Dict[UUID, LinkRecord] = {}
        self.fail_on: Set[str] = set()
        self.writes: List[str] = []

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StorageFailure(operation)

    def _snapshot(self) -> Tuple:
        return copy.deepcopy((self.trips, self.participants, self.activities, self.links))

    @asynccontextmanager
    async def atomic(self):
        snapshot = self._snapshot()
        try:
            yield
        except BaseException:
            self.trips, self.participants, self.activities, self.links = snapshot
            raise

    async def create_trip(self, params: NewTrip) -> UUID:
        self._check("create_trip")
        trip = TripRecord(id=uuid4(), is_confirmed=False, **params.model_dump())
        self.trips[trip.id] = trip
        self.writes.append("create_trip")
        return trip.id

    async def get_trip(self, trip_id: UUID) -> Optional[TripRecord]:
        self._check("get_trip")
        return self.trips.get(trip_id)

    async def update_trip(self, params: TripChanges) -> Optional[TripRecord]:
        self._check("update_trip")
        trip = self.trips.get(params.id)
        if not trip:
            return None
        trip = trip.model_copy(update=params.model_dump(exclude={"id"}))
        self.trips[trip.id] = trip
        self.writes.append("update_trip")
        return trip

    async def confirm_trip(self, trip_id: UUID) -> bool:
        self._check("confirm_trip")
        trip = self.trips.get(trip_id)
        if not trip or trip.is_confirmed:
            return False
        self.trips[trip_id] = trip.model_copy(update={"is_confirmed": True})
        self.writes.append("confirm_trip")
        return True

    async def get_participant(self, participant_id: UUID) -> Optional[ParticipantRecord]:
        self._check("get_participant")
        return self.participants.get(participant_id)

    async def get_participants(self, trip_id: UUID) -> List[ParticipantRecord]:
        self._check("get_participants")
        return [p for p in self.participants.values() if p.trip_id == trip_id]

    async def confirm_participant(self, participant_id: UUID) -> bool:
        self._check("confirm_participant")
        participant = self.participants.get(participant_id)
        if not participant or participant.is_confirmed:
            return False
        self.participants[participant_id] = participant.model_copy(update={"is_confirmed": True})
        self.writes.append("confirm_participant")
        return True

    async def invite_participants_to_trip(self, params: Sequence[NewParticipant]) -> int:
        async with self.atomic():
            for p in params:
                self._check("invite_participants_to_trip")
                if p.trip_id not in self.trips:
                    raise StorageFailure("invite_participants_to_trip")
                if any(q.trip_id == p.trip_id and q.email == p.email for q in self.participants.values()):
                    raise StorageFailure("invite_participants_to_trip")
                self.participants[p.id] = ParticipantRecord(**p.model_dump())
        self.writes.append("invite_participants_to_trip")
        return len(params)

    async def create_activity(self, params: NewActivity) -> UUID:
        self._check("create_activity")
        activity = ActivityRecord(id=uuid4(), **params.model_dump())
        self.activities[activity.id] = activity
        self.writes.append("create_activity")
        return activity.id

    async def get_trip_activities(self, trip_id: UUID) -> List[ActivityRecord]:
        self._check("get_trip_activities")
        return sorted(
            (a for a in self.activities.values() if a.trip_id == trip_id),
            key=lambda a: a.occurs_at,
        )

    async def create_trip_link(self, params: NewLink) -> UUID:
        self._check("create_trip_link")
        link = LinkRecord(id=uuid4(), **params.model_dump())
        self.links[link.id] = link
        self.writes.append("create_trip_link")
        return link.id

    async def get_trip_links(self, trip_id: UUID) -> List[LinkRecord]:
        self._check("get_trip_links")
        return [link for link in self.links.values() if link.trip_id == trip_id]


class RecordingNotifier:
    """Notifier that records calls; set ``fail_for`` to make sends raise."""

    def __init__(self):
        self.owner_confirmations: List[UUID] = []
        self.invites: List[Tuple[UUID, UUID]] = []
        self.fail_for: Set[UUID] = set()

    async def send_confirm_trip_email_to_trip_owner(self, trip_id: UUID) -> None:
        if trip_id in self.fail_for:
            raise NotificationFailure(f"smtp down for trip {trip_id}")
        self.owner_confirmations.append(trip_id)

    async def send_trip_invite_email(self, trip_id: UUID, participant_id: UUID) -> None:
        if participant_id in self.fail_for:
            raise NotificationFailure(f"smtp down for participant {participant_id}")
        self.invites.append((trip_id, participant_id))


@pytest.fixture
def repository():
    return InMemoryTripRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def trip_service(repository, notifier):
    return TripService(repository, notifier, PydanticValidator())


@pytest.fixture
def trip_payload():
    return {
        "destination": "Paris",
        "starts_at": "2025-06-01T00:00:00Z",
        "ends_at": "2025-06-10T00:00:00Z",
        "owner_name": "Ana",
        "owner_email": "ana@example.com",
        "emails_to_invite": ["bob@example.com"],
    }


@pytest_asyncio.fixture
async def drain():
    """Lets a test wait for the emails its workflow calls spawned."""
    yield drain_detached_tasks
    await drain_detached_tasks(timeout=2)


# SQLite-backed fixtures
@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'journey.sqlite3'}"


@pytest_asyncio.fixture
async def session_factory(sqlite_url):
    engine = create_async_engine(sqlite_url, poolclass=NullPool)
    await init_db(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
