import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linkdb.api.deps import get_current_user, get_metadata_service, get_session
from linkdb.exceptions import MetadataError
from linkdb.models import Actress, Link, User
from linkdb.schemas import LinkCreate, LinkRead, LinkUpdate
from linkdb.services.metadata import MetadataService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["links"])


async def _get_owned_link(db: AsyncSession, link_id: UUID, user: User) -> Link:
    result = await db.execute(
        select(Link)
        .where(Link.id == link_id, Link.user_id == user.id)
        .execution_options(populate_existing=True)
    )
    link = result.scalar_one_or_none()
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Link not found"
        )
    return link


async def _ensure_actress(db: AsyncSession, actress_id: Optional[UUID]) -> None:
    if actress_id is None:
        return
    if await db.get(Actress, actress_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Actress not found"
        )


@router.get("", response_model=list[LinkRead])
async def list_links(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
    favorite: Optional[bool] = None,
    actress_id: Optional[UUID] = None,
    q: Annotated[Optional[str], Query(max_length=200)] = None,
) -> list[LinkRead]:
    """List the current user's links, newest first."""
    query = select(Link).where(Link.user_id == current_user.id)
    if favorite is not None:
        query = query.where(Link.favorite == favorite)
    if actress_id is not None:
        query = query.where(Link.actress_id == actress_id)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.where(or_(Link.title.ilike(pattern), Link.url.ilike(pattern)))

    result = await db.execute(query.order_by(Link.created_at.desc()))
    return [LinkRead.model_validate(link) for link in result.scalars().all()]


@router.post("", response_model=LinkRead, status_code=status.HTTP_201_CREATED)
async def create_link(
    payload: LinkCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
    metadata_service: Annotated[MetadataService, Depends(get_metadata_service)],
) -> LinkRead:
    """Create a new link for the current user."""
    url = str(payload.url)
    result = await db.execute(
        select(Link.id).where(Link.url == url, Link.user_id == current_user.id)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Link already exists"
        )
    await _ensure_actress(db, payload.actress_id)

    title, image = payload.title, payload.image
    if payload.fetch_metadata and title is None and image is None:
        try:
            extracted = await metadata_service.extract(url)
        except MetadataError as exc:
            # A bookmark is still worth keeping without a title or preview.
            logger.warning(
                "Saving %s without metadata (%s): %s", url, exc.kind.value, exc
            )
        else:
            title, image = extracted.title, extracted.image

    link = Link(
        user_id=current_user.id,
        url=url,
        title=title or None,
        image=image or None,
        favorite=payload.favorite,
        actress_id=payload.actress_id,
    )
    db.add(link)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create of the same URL.
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Link already exists"
        )
    return LinkRead.model_validate(await _get_owned_link(db, link.id, current_user))


@router.get("/{link_id}", response_model=LinkRead)
async def get_link(
    link_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> LinkRead:
    """Get a specific link by ID (must belong to current user)."""
    return LinkRead.model_validate(await _get_owned_link(db, link_id, current_user))


@router.patch("/{link_id}", response_model=LinkRead)
async def update_link(
    link_id: UUID,
    payload: LinkUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> LinkRead:
    """Update a link's details (must belong to current user)."""
    link = await _get_owned_link(db, link_id, current_user)

    # Only fields present in the request change; an explicit null clears.
    changes = payload.model_dump(exclude_unset=True)
    if "favorite" in changes and changes["favorite"] is None:
        del changes["favorite"]
    if "actress_id" in changes:
        await _ensure_actress(db, changes["actress_id"])
    for field, value in changes.items():
        setattr(link, field, value)

    await db.commit()
    return LinkRead.model_validate(await _get_owned_link(db, link_id, current_user))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(
    link_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Delete a link (must belong to current user)."""
    link = await _get_owned_link(db, link_id, current_user)
    await db.delete(link)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{link_id}/click", response_model=LinkRead)
async def record_click(
    link_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> LinkRead:
    """Increment a link's click count."""
    link = await _get_owned_link(db, link_id, current_user)
    link.click_count = Link.click_count + 1
    await db.commit()
    return LinkRead.model_validate(await _get_owned_link(db, link_id, current_user))
