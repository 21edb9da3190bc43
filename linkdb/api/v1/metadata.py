from typing import Annotated

from fastapi import APIRouter, Depends

from linkdb.api.deps import get_current_user, get_metadata_service
from linkdb.models import User
from linkdb.schemas import MetadataRead, MetadataRequest
from linkdb.services.metadata import MetadataService

router = APIRouter(prefix="/metadata", tags=["metadata"])


@router.post("", response_model=MetadataRead)
async def extract_metadata(
    payload: MetadataRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MetadataService, Depends(get_metadata_service)],
) -> MetadataRead:
    """Scrape the title and preview image of a page.

    Extraction failures are rendered by the ``MetadataError`` handler.
    """
    result = await service.extract(payload.url.strip())
    return MetadataRead.model_validate(result)
