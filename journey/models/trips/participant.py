from sqlalchemy import Column, ForeignKey, String, Boolean, Uuid, Index
from sqlalchemy.orm import relationship
from journey.core.database import Base
import uuid


class Participant(Base):
    __tablename__ = "participants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id = Column(Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    is_confirmed = Column(Boolean, nullable=False, default=False)
    is_owner = Column(Boolean, nullable=False, default=False)

    # One row per address, and at most one owner row, per trip
    __table_args__ = (
        Index("uq_participants_trip_email", "trip_id", "email", unique=True),
        Index(
            "uq_participants_trip_owner",
            "trip_id",
            unique=True,
            postgresql_where=is_owner.is_(True),
            sqlite_where=is_owner.is_(True),
        ),
    )

    trip = relationship("Trip", back_populates="participants")
