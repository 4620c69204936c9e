from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from app.models.listing import ListingStatus
from app.utils.media import relative_media_path

_camel_config = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class _MediaPathsMixin(BaseModel):
    """Stores uploads references as ``/uploads/<name>`` whatever host they name."""

    @field_validator("images", check_fields=False)
    @classmethod
    def _relative_images(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return [relative_media_path(v) for v in value]

    @field_validator("agent_photo", check_fields=False)
    @classmethod
    def _relative_agent_photo(cls, value: str | None) -> str | None:
        return relative_media_path(value)


class ListingCreate(_MediaPathsMixin):
    title: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    beds: int | None = Field(default=None, ge=0)
    baths: int | None = Field(default=None, ge=0)
    living_area: float | None = Field(default=None, ge=0)
    status: ListingStatus = ListingStatus.ACTIVE
    images: list[str] = []
    agent_photo: str | None = None

    model_config = _camel_config


class ListingUpdate(_MediaPathsMixin):
    title: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    beds: int | None = Field(default=None, ge=0)
    baths: int | None = Field(default=None, ge=0)
    living_area: float | None = Field(default=None, ge=0)
    status: ListingStatus | None = None
    images: list[str] | None = None
    agent_photo: str | None = None

    model_config = _camel_config


class ListingResponse(BaseModel):
    id: str
    title: str | None = None
    price: float | None = None
    beds: int | None = None
    baths: int | None = None
    living_area: float | None = None
    status: str
    images: list[str] = []
    agent_photo: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True, **_camel_config}

    @field_serializer("price", "living_area")
    def _whole_as_int(self, value: float | None) -> int | float | None:
        # "250000" goes back out as 250000, not 250000.0
        if value is not None and value.is_integer():
            return int(value)
        return value
