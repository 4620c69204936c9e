"""Listing CRUD plus association of uploaded media with listing fields."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError
from sqlalchemy import select

from app.models.listing import Listing
from app.schemas.listing import ListingCreate, ListingUpdate
from app.utils.exceptions import ListingNotFoundError, ListingValidationError
from app.utils.file_handling import save_upload_file, validate_file
from app.utils.ids import parse_id

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from app.config import Settings
    from app.utils.file_handling import UploadedFiles

logger = logging.getLogger(__name__)

IMAGE_FIELD = "imageFiles"
AGENT_PHOTO_FIELD = "agentPhotoFile"

PayloadT = TypeVar("PayloadT", ListingCreate, ListingUpdate)


def _validate(schema: type[PayloadT], data: dict[str, Any]) -> PayloadT:
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "field": ".".join(str(p) for p in err["loc"]),
                "msg": err["msg"],
            }
            for err in e.errors()
        ]
        raise ListingValidationError(errors) from e


async def attach_uploads(
    payload: PayloadT, files: UploadedFiles, settings: Settings
) -> PayloadT:
    """Store uploaded media and reference it from ``payload``.

    Image uploads replace ``images`` as a whole; an agent photo upload
    replaces ``agent_photo``. Every file is checked before any is written.
    """
    images = files.get(IMAGE_FIELD, [])
    agent_photos = files.get(AGENT_PHOTO_FIELD, [])
    for file in [*images, *agent_photos[:1]]:
        validate_file(file, settings.allowed_extension_set)

    media: dict[str, Any] = {}
    if images:
        media["images"] = [await save_upload_file(f, settings) for f in images]
    if agent_photos:
        media["agent_photo"] = await save_upload_file(agent_photos[0], settings)
    return payload.model_copy(update=media) if media else payload


def list_listings(db: Session) -> list[Listing]:
    return list(db.scalars(select(Listing).order_by(Listing.created_at.desc())))


def get_listing(db: Session, listing_id: str) -> Listing:
    listing = db.get(Listing, parse_id(listing_id, "listing id"))
    if listing is None:
        raise ListingNotFoundError("Listing not found")
    return listing


def validate_create(data: dict[str, Any]) -> ListingCreate:
    return _validate(ListingCreate, data)


def validate_update(data: dict[str, Any]) -> ListingUpdate:
    return _validate(ListingUpdate, data)


def create_listing(db: Session, payload: ListingCreate) -> Listing:
    listing = Listing(**payload.model_dump(mode="json"))
    db.add(listing)
    db.commit()
    db.refresh(listing)
    logger.info("Created listing id=%s images=%d", listing.id, len(listing.images))
    return listing


def update_listing(db: Session, listing_id: str, payload: ListingUpdate) -> Listing:
    listing = get_listing(db, listing_id)
    changes = payload.model_dump(mode="json", exclude_unset=True)
    # Explicit nulls cannot clear required columns.
    for field in ("status", "images"):
        if field in changes and changes[field] is None:
            del changes[field]
    for field, value in changes.items():
        setattr(listing, field, value)
    db.commit()
    db.refresh(listing)
    logger.info("Updated listing id=%s fields=%s", listing.id, sorted(changes))
    return listing


def delete_listing(db: Session, listing_id: str) -> None:
    """Remove the record. Uploaded files stay on disk."""
    listing = get_listing(db, listing_id)
    db.delete(listing)
    db.commit()
    logger.info("Deleted listing id=%s", listing.id)
