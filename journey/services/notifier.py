from typing import Protocol
from uuid import UUID


class Notifier(Protocol):
    """Outgoing trip emails. Implementations raise NotificationFailure on error."""

    async def send_confirm_trip_email_to_trip_owner(self, trip_id: UUID) -> None: ...

    async def send_trip_invite_email(self, trip_id: UUID, participant_id: UUID) -> None: ...
