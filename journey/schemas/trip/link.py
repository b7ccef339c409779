from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from typing import List, Optional
from uuid import UUID

_http_url = TypeAdapter(HttpUrl)


class LinkCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    url: str = Field(max_length=2048)
    trip_id: Optional[UUID] = None

    # Validated as an http(s) URL but kept as submitted, not normalized
    @field_validator("url")
    @classmethod
    def url_must_be_http(cls, v: str) -> str:
        try:
            _http_url.validate_python(v)
        except ValidationError as e:
            raise ValueError(e.errors()[0]["msg"]) from None
        return v


class LinkCreateResponse(BaseModel):
    link_id: str


class LinkOut(BaseModel):
    id: str
    title: str
    url: str


class LinkListResponse(BaseModel):
    links: List[LinkOut]
