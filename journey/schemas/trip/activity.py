from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional
from uuid import UUID


class ActivityCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    occurs_at: datetime
    trip_id: Optional[UUID] = None


class ActivityCreateResponse(BaseModel):
    activity_id: str


class ActivityOut(BaseModel):
    id: str
    title: str
    occurs_at: datetime


class ActivityDay(BaseModel):
    date: datetime
    activities: List[ActivityOut]


class ActivityListResponse(BaseModel):
    activities: List[ActivityDay]
