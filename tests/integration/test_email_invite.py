"""SMTP notifier tests; the SMTP call itself is patched out."""

import smtplib
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from journey.core.errors import NotificationFailure
from journey.repositories.records import NewParticipant, NewTrip, ParticipantRecord, TripRecord
from journey.repositories.sqlalchemy_repository import SqlAlchemyTripRepository
from journey.services.trips.email_invite import (
    SmtpNotifier,
    build_invite_email,
    build_owner_confirmation_email,
)


def _trip() -> TripRecord:
    return TripRecord(
        id=uuid4(),
        destination="Paris",
        starts_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
        ends_at=datetime(2025, 6, 10, tzinfo=timezone.utc),
        is_confirmed=False,
        owner_name="Ana",
        owner_email="ana@example.com",
    )


def test_owner_confirmation_email_links_to_trip_confirm():
    trip = _trip()

    subject, html, text = build_owner_confirmation_email(trip)

    assert "Paris" in subject
    assert "01/06/2025" in subject
    assert f"/trips/{trip.id}/confirm" in html
    assert f"/trips/{trip.id}/confirm" in text
    assert "01/06/2025 - 10/06/2025" in text


def test_invite_email_links_to_participant_confirm():
    trip = _trip()
    participant = ParticipantRecord(
        id=uuid4(), trip_id=trip.id, email="bob@example.com", is_confirmed=False, is_owner=False
    )

    subject, html, text = build_invite_email(trip, participant)

    assert subject == "You're invited to a trip to Paris"
    assert f"/participants/{participant.id}/confirm" in html
    assert text.startswith("Hey there")
    assert "Ana invited you" in text


async def _seed(session_factory):
    async with session_factory() as session:
        repository = SqlAlchemyTripRepository(session)
        async with repository.atomic():
            trip_id = await repository.create_trip(
                NewTrip(
                    destination="Paris",
                    starts_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
                    ends_at=datetime(2025, 6, 10, tzinfo=timezone.utc),
                    owner_name="Ana",
                    owner_email="ana@example.com",
                )
            )
            bob = NewParticipant(trip_id=trip_id, email="bob@example.com", name="Bob")
            await repository.invite_participants_to_trip([bob])
    return trip_id, bob.id


@pytest.mark.asyncio
async def test_owner_confirmation_is_sent_to_owner(session_factory):
    trip_id, _ = await _seed(session_factory)
    sender = MagicMock()

    with patch("journey.services.trips.email_invite.send_email_html", sender):
        await SmtpNotifier(session_factory).send_confirm_trip_email_to_trip_owner(trip_id)

    sender.assert_called_once()
    to_email, subject, html, text = sender.call_args.args
    assert to_email == "ana@example.com"
    assert "Paris" in subject
    assert f"/trips/{trip_id}/confirm" in html


@pytest.mark.asyncio
async def test_invite_is_sent_to_participant(session_factory):
    trip_id, bob_id = await _seed(session_factory)
    sender = MagicMock()

    with patch("journey.services.trips.email_invite.send_email_html", sender):
        await SmtpNotifier(session_factory).send_trip_invite_email(trip_id, bob_id)

    to_email, _, html, text = sender.call_args.args
    assert to_email == "bob@example.com"
    assert text.startswith("Hi Bob")
    assert f"/participants/{bob_id}/confirm" in html


@pytest.mark.asyncio
async def test_smtp_error_becomes_notification_failure(session_factory):
    trip_id, _ = await _seed(session_factory)
    sender = MagicMock(side_effect=smtplib.SMTPServerDisconnected("gone"))

    with patch("journey.services.trips.email_invite.send_email_html", sender):
        with pytest.raises(NotificationFailure, match="ana@example.com"):
            await SmtpNotifier(session_factory).send_confirm_trip_email_to_trip_owner(trip_id)


@pytest.mark.asyncio
async def test_unknown_trip_is_a_notification_failure(session_factory):
    sender = MagicMock()

    with patch("journey.services.trips.email_invite.send_email_html", sender):
        with pytest.raises(NotificationFailure):
            await SmtpNotifier(session_factory).send_confirm_trip_email_to_trip_owner(uuid4())

    sender.assert_not_called()


@pytest.mark.asyncio
async def test_participant_of_another_trip_is_rejected(session_factory):
    trip_id, _ = await _seed(session_factory)
    _, other_participant = await _seed(session_factory)

    with patch("journey.services.trips.email_invite.send_email_html", MagicMock()):
        with pytest.raises(NotificationFailure):
            await SmtpNotifier(session_factory).send_trip_invite_email(trip_id, other_participant)
