from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from journey.core.database import SessionLocal, get_db
from journey.core.validation import InputValidator, PydanticValidator
from journey.repositories.sqlalchemy_repository import SqlAlchemyTripRepository
from journey.services.notifier import Notifier
from journey.services.trips.email_invite import SmtpNotifier
from journey.services.trips.trip_service import TripService


def get_notifier() -> Notifier:
    return SmtpNotifier(SessionLocal)


def get_validator() -> InputValidator:
    return PydanticValidator()


async def get_trip_service(
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    validator: InputValidator = Depends(get_validator),
) -> TripService:
    return TripService(SqlAlchemyTripRepository(db), notifier, validator)
