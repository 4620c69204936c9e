from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from sqlalchemy import JSON, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.utils.ids import new_id


class ListingStatus(StrEnum):
    ACTIVE = "active"
    UNDER_CONTRACT = "under-contract"
    SOLD = "sold"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Listing(Base):
    """Property listing managed from the admin panel.

    Media columns hold storage-relative paths (``/uploads/<filename>``);
    absolute URLs are produced only when a listing is read.
    """

    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    beds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    baths: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    living_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ListingStatus.ACTIVE.value
    )
    images: Mapped[list[str]] = mapped_column(JSON, default=list)
    agent_photo: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
