"""Link request/response schemas."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from portal.schemas.icon import IconRef, accept_legacy_icon_url, unpack_icon_columns
from portal.schemas.subsite import validate_http_url


class LinkCreate(BaseModel):
    subsite_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    description: str | None = None
    icon: IconRef | None = None
    order: int = 0

    @model_validator(mode="before")
    @classmethod
    def legacy_icon_url(cls, data: Any) -> Any:
        return accept_legacy_icon_url(data)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_http_url(v)


class LinkUpdate(BaseModel):
    subsite_id: uuid.UUID | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    url: str | None = Field(None, min_length=1, max_length=2048)
    description: str | None = None
    icon: IconRef | None = None
    order: int | None = None

    @model_validator(mode="before")
    @classmethod
    def legacy_icon_url(cls, data: Any) -> Any:
        return accept_legacy_icon_url(data)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("may not be null")
        return validate_http_url(v)

    @field_validator("subsite_id", "name", "order")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class LinkResponse(BaseModel):
    id: uuid.UUID
    subsite_id: uuid.UUID
    name: str
    url: str
    description: str | None = None
    icon: IconRef | None = None
    order: int
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def from_icon_columns(cls, data: Any) -> Any:
        return unpack_icon_columns(data, cls.model_fields)
