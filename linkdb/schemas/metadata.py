from typing import Optional

from pydantic import BaseModel, ConfigDict


class MetadataRequest(BaseModel):
    # Validated by the extraction service so bad input maps to invalid_input.
    url: str


class MetadataRead(BaseModel):
    url: str
    title: str
    image: Optional[str]

    model_config = ConfigDict(from_attributes=True)
