from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.config import Settings
from app.database import get_db
from app.dependencies import get_settings
from app.models.listing import Listing
from app.schemas.listing import ListingResponse
from app.services import listing_service
from app.utils.exceptions import (
    InvalidIdError,
    ListingNotFoundError,
    ListingValidationError,
    UploadRejectedError,
)
from app.utils.file_handling import UploadedFiles, group_uploads
from app.utils.media import absolute_media_url

router = APIRouter(prefix="/listings")

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
# Text fields that are lists even when the form repeats them only once.
_LIST_FIELDS = {"images"}


async def _read_listing_request(request: Request) -> tuple[dict[str, Any], UploadedFiles]:
    """Split a multipart/urlencoded or JSON body into text fields and files.

    Repeated text fields (``images=a&images=b`` or ``images[]=...``) become
    lists. Empty form values are treated as absent so optional numeric inputs
    left blank in the admin form do not fail coercion.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        values: dict[str, list[str]] = {}
        uploads: list[tuple[str, UploadFile]] = []
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                uploads.append((key, value))
            elif value != "":
                name = key[:-2] if key.endswith("[]") else key
                values.setdefault(name, []).append(value)
        fields: dict[str, Any] = {
            name: items if name in _LIST_FIELDS or len(items) > 1 else items[0]
            for name, items in values.items()
        }
        return fields, group_uploads(uploads)

    raw = await request.body()
    if not raw:
        return {}, {}
    try:
        body = await request.json()
    except ValueError as e:
        raise ListingValidationError([{"field": "body", "msg": "Invalid JSON"}]) from e
    if not isinstance(body, dict):
        raise ListingValidationError([{"field": "body", "msg": "Expected an object"}])
    return body, {}


def _to_response(listing: Listing, settings: Settings) -> ListingResponse:
    response = ListingResponse.model_validate(listing)
    return response.model_copy(
        update={
            "images": [absolute_media_url(i, settings.site_base) for i in response.images],
            "agent_photo": absolute_media_url(response.agent_photo, settings.site_base),
        }
    )


@router.get("", response_model=list[ListingResponse])
def list_listings(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[ListingResponse]:
    return [_to_response(l, settings) for l in listing_service.list_listings(db)]


@router.get("/{listing_id}", response_model=ListingResponse)
def get_listing(
    listing_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ListingResponse:
    try:
        listing = listing_service.get_listing(db, listing_id)
    except InvalidIdError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ListingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _to_response(listing, settings)


@router.post("", response_model=ListingResponse, status_code=201)
async def create_listing(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ListingResponse:
    try:
        fields, files = await _read_listing_request(request)
        payload = listing_service.validate_create(fields)
        payload = await listing_service.attach_uploads(payload, files, settings)
    except ListingValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors) from e
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    listing = listing_service.create_listing(db, payload)
    return _to_response(listing, settings)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ListingResponse:
    try:
        # Resolve the target first so uploads are not stored for a bad id.
        listing_service.get_listing(db, listing_id)
        fields, files = await _read_listing_request(request)
        payload = listing_service.validate_update(fields)
        payload = await listing_service.attach_uploads(payload, files, settings)
        listing = listing_service.update_listing(db, listing_id, payload)
    except InvalidIdError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ListingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ListingValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors) from e
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _to_response(listing, settings)


@router.delete("/{listing_id}")
def delete_listing(listing_id: str, db: Session = Depends(get_db)) -> dict:
    try:
        listing_service.delete_listing(db, listing_id)
    except InvalidIdError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ListingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"ok": True}
