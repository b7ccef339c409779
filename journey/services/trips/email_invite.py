import asyncio
import smtplib
from typing import Callable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from journey.core.config import settings
from journey.core.errors import NotificationFailure, StorageFailure
from journey.core.logger import logger
from journey.repositories.records import ParticipantRecord, TripRecord
from journey.repositories.sqlalchemy_repository import SqlAlchemyTripRepository
from journey.services.email_service import send_email_html

DATE_FORMAT = "%d/%m/%Y"


def generate_trip_confirm_link(trip_id: UUID) -> str:
    return f"{settings.API_BASE_URL}/trips/{trip_id}/confirm"


def generate_participant_confirm_link(participant_id: UUID) -> str:
    return f"{settings.API_BASE_URL}/participants/{participant_id}/confirm"


def _trip_period(trip: TripRecord) -> str:
    return f"{trip.starts_at.strftime(DATE_FORMAT)} - {trip.ends_at.strftime(DATE_FORMAT)}"


def build_owner_confirmation_email(trip: TripRecord) -> tuple:
    """
    Returns (subject, html, text) for the email asking the owner to confirm a trip.
    """
    link = generate_trip_confirm_link(trip.id)
    subject = f"Confirm your trip to {trip.destination} on {trip.starts_at.strftime(DATE_FORMAT)}"
    html = f"""
    <html>
      <body>
        <p>Hi {trip.owner_name},<br><br>
           You asked to create a trip to <strong>{trip.destination}</strong>
           for <strong>{_trip_period(trip)}</strong>.<br><br>
           Click the button below to confirm it:<br><br>
           <a href="{link}" style="padding: 10px 20px; background-color: #0984e3; color: white; text-decoration: none; border-radius: 5px;">Confirm trip</a>
           <br><br>
           Or paste this link into your browser:<br>
           <code>{link}</code>
           <br><br>
           If you did not ask for this trip, just ignore this email.
        </p>
      </body>
    </html>
    """
    text = (
        f"Hi {trip.owner_name},\n\n"
        f"Confirm your trip to {trip.destination} ({_trip_period(trip)}):\n{link}\n"
    )
    return subject, html, text


def build_invite_email(trip: TripRecord, participant: ParticipantRecord) -> tuple:
    """
    Returns (subject, html, text) for the invitation sent to a participant.
    """
    link = generate_participant_confirm_link(participant.id)
    greeting = f"Hi {participant.name}" if participant.name else "Hey there"
    subject = f"You're invited to a trip to {trip.destination}"
    html = f"""
    <html>
      <body>
        <p>{greeting},<br><br>
           {trip.owner_name} invited you to a trip to <strong>{trip.destination}</strong>
           for <strong>{_trip_period(trip)}</strong>.<br><br>
           Click the button below to confirm your presence:<br><br>
           <a href="{link}" style="padding: 10px 20px; background-color: #0984e3; color: white; text-decoration: none; border-radius: 5px;">Confirm presence</a>
           <br><br>
           Or paste this link into your browser:<br>
           <code>{link}</code>
           <br><br>
           Trip details: <a href="{settings.FRONTEND_BASE_URL}/trips/{trip.id}">{settings.FRONTEND_BASE_URL}/trips/{trip.id}</a>
        </p>
      </body>
    </html>
    """
    text = (
        f"{greeting},\n\n"
        f"{trip.owner_name} invited you to a trip to {trip.destination} ({_trip_period(trip)}).\n"
        f"Confirm your presence: {link}\n"
    )
    return subject, html, text


class SmtpNotifier:
    """
    Notifier sending trip emails over SMTP.

    Runs outside any request, so it loads the trip through its own session.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def _load_trip(self, repository: SqlAlchemyTripRepository, trip_id: UUID) -> TripRecord:
        trip = await repository.get_trip(trip_id)
        if not trip:
            raise NotificationFailure(f"trip {trip_id} not found")
        return trip

    async def _send(self, to_email: str, subject: str, html: str, text: str) -> None:
        try:
            await asyncio.to_thread(send_email_html, to_email, subject, html, text)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"failed to send email to {to_email}: {e}") from e

    async def send_confirm_trip_email_to_trip_owner(self, trip_id: UUID) -> None:
        async with self.session_factory() as session:
            try:
                trip = await self._load_trip(SqlAlchemyTripRepository(session), trip_id)
            except StorageFailure as e:
                raise NotificationFailure(f"failed to load trip {trip_id}") from e

        subject, html, text = build_owner_confirmation_email(trip)
        await self._send(trip.owner_email, subject, html, text)
        logger.info(f"[Email] Confirmation for trip {trip_id} sent to {trip.owner_email}")

    async def send_trip_invite_email(self, trip_id: UUID, participant_id: UUID) -> None:
        async with self.session_factory() as session:
            repository = SqlAlchemyTripRepository(session)
            try:
                trip = await self._load_trip(repository, trip_id)
                participant = await repository.get_participant(participant_id)
            except StorageFailure as e:
                raise NotificationFailure(f"failed to load trip {trip_id}") from e

        if not participant or participant.trip_id != trip_id:
            raise NotificationFailure(f"participant {participant_id} not found on trip {trip_id}")

        subject, html, text = build_invite_email(trip, participant)
        await self._send(participant.email, subject, html, text)
        logger.info(f"[Email] Invite for trip {trip_id} sent to {participant.email}")
