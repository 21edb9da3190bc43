from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkdb.api.deps import get_current_user, get_session
from linkdb.models import Actress, User
from linkdb.schemas import ActressCreate, ActressRead

router = APIRouter(prefix="/actresses", tags=["actresses"])


@router.get("", response_model=list[ActressRead])
async def list_actresses(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> list[ActressRead]:
    """List all actresses ordered by name."""
    result = await db.execute(select(Actress).order_by(Actress.name))
    return [ActressRead.model_validate(actress) for actress in result.scalars()]


@router.post("", response_model=ActressRead, status_code=status.HTTP_201_CREATED)
async def create_actress(
    payload: ActressCreate,
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ActressRead:
    """Create an actress, or return the existing one with the same name."""
    name = payload.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required"
        )

    result = await db.execute(select(Actress).where(Actress.name == name))
    existing = result.scalar_one_or_none()
    if existing:
        response.status_code = status.HTTP_200_OK
        return ActressRead.model_validate(existing)

    actress = Actress(name=name)
    db.add(actress)
    await db.commit()
    await db.refresh(actress)
    return ActressRead.model_validate(actress)
