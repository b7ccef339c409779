from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class TripDates(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    destination: str = Field(min_length=1, max_length=255)
    starts_at: datetime
    ends_at: datetime

    @model_validator(mode="after")
    def check_dates(self):
        if (self.starts_at.tzinfo is None) != (self.ends_at.tzinfo is None):
            raise ValueError("starts_at and ends_at must both carry a timezone or neither")
        if self.starts_at > self.ends_at:
            raise ValueError("starts_at must not be after ends_at")
        return self


# Body of POST /trips
class TripCreate(TripDates):
    owner_name: str = Field(min_length=1, max_length=255)
    owner_email: EmailStr
    emails_to_invite: List[EmailStr] = Field(default_factory=list)


# Body of PUT /trips/{trip_id}
class TripUpdate(TripDates):
    trip_id: Optional[UUID] = None


class TripCreateResponse(BaseModel):
    trip_id: str


class TripDetails(BaseModel):
    id: str
    destination: str
    starts_at: datetime
    ends_at: datetime
    is_confirmed: bool


class TripDetailsResponse(BaseModel):
    trip: TripDetails
