"""Repository interface consumed by the trip workflow."""

from typing import AsyncContextManager, List, Optional, Protocol, Sequence
from uuid import UUID

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


class TripRepository(Protocol):
    """
    Storage capabilities for trips and their children.

    Lookups return ``None`` for a missing row. Any backend failure is raised
    as ``StorageFailure``. Writes issued inside ``atomic()`` persist together
    or not at all; writes outside it are committed individually.

    ``confirm_trip`` and ``confirm_participant`` only flip a flag that is
    still false and return whether they did.
    """

    def atomic(self) -> AsyncContextManager[None]: ...

    async def create_trip(self, params: NewTrip) -> UUID: ...

    async def get_trip(self, trip_id: UUID) -> Optional[TripRecord]: ...

    async def update_trip(self, params: TripChanges) -> Optional[TripRecord]: ...

    async def confirm_trip(self, trip_id: UUID) -> bool: ...

    async def get_participant(self, participant_id: UUID) -> Optional[ParticipantRecord]: ...

    async def get_participants(self, trip_id: UUID) -> List[ParticipantRecord]: ...

    async def confirm_participant(self, participant_id: UUID) -> bool: ...

    async def invite_participants_to_trip(self, params: Sequence[NewParticipant]) -> int: ...

    async def create_activity(self, params: NewActivity) -> UUID: ...

    async def get_trip_activities(self, trip_id: UUID) -> List[ActivityRecord]: ...

    async def create_trip_link(self, params: NewLink) -> UUID: ...

    async def get_trip_links(self, trip_id: UUID) -> List[LinkRecord]: ...
