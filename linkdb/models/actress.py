from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkdb.models.base import Base

if TYPE_CHECKING:
    from linkdb.models.link import Link


class Actress(Base):
    __tablename__ = "actresses"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    links: Mapped[list["Link"]] = relationship("Link", back_populates="actress")
