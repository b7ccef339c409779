from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from uuid import UUID


# 📨 Body of POST /trips/{trip_id}/invites
class ParticipantInvite(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=255)
    # Ignored, the path trip id always wins
    trip_id: Optional[UUID] = None


class ParticipantOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    is_confirmed: bool
    is_owner: bool


class ParticipantListResponse(BaseModel):
    participants: List[ParticipantOut]
