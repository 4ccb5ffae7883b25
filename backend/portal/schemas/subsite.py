"""Subsite request/response schemas."""

import re
import uuid
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from portal.schemas.icon import IconRef, accept_legacy_icon_url, unpack_icon_columns

_DOMAIN_RE = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*\.)+[a-z]{2,}$", re.IGNORECASE)


def validate_http_url(v: str) -> str:
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL")
    return v


def _optional_url(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    return validate_http_url(v)


def _optional_domain(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    if not _DOMAIN_RE.match(v):
        raise ValueError("Invalid domain format (e.g., example.com or subdomain.example.com)")
    return v.lower()


class SubsiteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    icon: IconRef | None = None
    url: str | None = Field(None, max_length=2048)
    custom_domain: str | None = Field(None, max_length=253)
    parent_id: uuid.UUID | None = None
    order: int = 0

    @model_validator(mode="before")
    @classmethod
    def legacy_icon_url(cls, data: Any) -> Any:
        return accept_legacy_icon_url(data)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        return _optional_url(v)

    @field_validator("custom_domain")
    @classmethod
    def validate_custom_domain(cls, v: str | None) -> str | None:
        return _optional_domain(v)


class SubsiteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    icon: IconRef | None = None
    url: str | None = Field(None, max_length=2048)
    custom_domain: str | None = Field(None, max_length=253)
    parent_id: uuid.UUID | None = None
    order: int | None = None

    @model_validator(mode="before")
    @classmethod
    def legacy_icon_url(cls, data: Any) -> Any:
        return accept_legacy_icon_url(data)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        return _optional_url(v)

    @field_validator("custom_domain")
    @classmethod
    def validate_custom_domain(cls, v: str | None) -> str | None:
        return _optional_domain(v)

    @field_validator("name", "order")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class SubsiteResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    icon: IconRef | None = None
    url: str | None = None
    custom_domain: str | None = None
    parent_id: uuid.UUID | None = None
    order: int
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def from_icon_columns(cls, data: Any) -> Any:
        return unpack_icon_columns(data, cls.model_fields)
