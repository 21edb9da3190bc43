from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from linkdb.schemas.actress import ActressRead
from linkdb.services.urls import is_absolute_url


def _validate_image(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not is_absolute_url(value):
        raise ValueError("image must be an absolute http(s) URL")
    return value


class LinkBase(BaseModel):
    url: HttpUrl
    title: Optional[str] = None
    image: Optional[str] = None
    favorite: bool = False
    actress_id: Optional[UUID] = None

    @field_validator("image")
    @classmethod
    def check_image(cls, value: Optional[str]) -> Optional[str]:
        return _validate_image(value)


class LinkCreate(LinkBase):
    fetch_metadata: bool = Field(
        default=True,
        description="Scrape title and image when neither is supplied",
    )


class LinkUpdate(BaseModel):
    favorite: Optional[bool] = Field(default=None)
    actress_id: Optional[UUID] = Field(default=None)
    title: Optional[str] = Field(default=None)
    image: Optional[str] = Field(default=None)

    @field_validator("image")
    @classmethod
    def check_image(cls, value: Optional[str]) -> Optional[str]:
        return _validate_image(value)


class LinkRead(BaseModel):
    id: UUID
    user_id: UUID
    url: str
    title: Optional[str]
    image: Optional[str]
    favorite: bool
    click_count: int
    actress_id: Optional[UUID]
    actress: Optional[ActressRead]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
