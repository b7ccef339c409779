# models/trips/activity.py

from sqlalchemy import Column, String, ForeignKey, DateTime, Uuid
from sqlalchemy.orm import relationship
from journey.core.database import Base
import uuid

class Activity(Base):
    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id = Column(Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    occurs_at = Column(DateTime(timezone=True), nullable=False)

    # Relationship back to trip
    trip = relationship("Trip", back_populates="activities")
