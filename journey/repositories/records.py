"""Records exchanged across the repository boundary."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class TripRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    destination: str
    starts_at: datetime
    ends_at: datetime
    is_confirmed: bool
    owner_name: str
    owner_email: str


class ParticipantRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    name: Optional[str] = None
    email: str
    is_confirmed: bool
    is_owner: bool


class ActivityRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    title: str
    occurs_at: datetime


class LinkRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    title: str
    url: str


class NewTrip(BaseModel):
    destination: str
    starts_at: datetime
    ends_at: datetime
    owner_name: str
    owner_email: str


class TripChanges(BaseModel):
    id: UUID
    destination: str
    starts_at: datetime
    ends_at: datetime


class NewParticipant(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    trip_id: UUID
    email: str
    name: Optional[str] = None
    is_owner: bool = False
    is_confirmed: bool = False


class NewActivity(BaseModel):
    trip_id: UUID
    title: str
    occurs_at: datetime


class NewLink(BaseModel):
    trip_id: UUID
    title: str
    url: str
