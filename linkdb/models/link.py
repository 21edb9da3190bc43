from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, UniqueConstraint, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkdb.models.base import Base

if TYPE_CHECKING:
    from linkdb.models.actress import Actress
    from linkdb.models.user import User


class Link(Base):
    __tablename__ = "links"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    actress_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("actresses.id", ondelete="SET NULL"), index=True
    )
    url: Mapped[str]
    title: Mapped[Optional[str]]
    image: Mapped[Optional[str]]
    favorite: Mapped[bool] = mapped_column(default=False, server_default=false())
    click_count: Mapped[int] = mapped_column(default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="links")
    actress: Mapped[Optional["Actress"]] = relationship(
        "Actress", back_populates="links", lazy="selectin"
    )

    # Constraints
    __table_args__ = (UniqueConstraint("user_id", "url", name="unique_user_url"),)
