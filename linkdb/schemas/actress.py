from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ActressCreate(BaseModel):
    name: str


class ActressRead(BaseModel):
    id: UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
