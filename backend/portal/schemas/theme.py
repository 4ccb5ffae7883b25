"""Theme request/response schemas."""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class ThemeColors(BaseModel):
    primary: str
    background: str
    surface: str
    accent: str
    text: str
    text_secondary: str
    border: str

    @field_validator("*")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        if not _HEX_COLOR_RE.match(v):
            raise ValueError("Must be a hex color in #RRGGBB format")
        return v


class ThemeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    colors: ThemeColors
    logo_url: str | None = Field(None, max_length=2048)


class ThemeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    colors: ThemeColors | None = None
    logo_url: str | None = Field(None, max_length=2048)

    @field_validator("name", "colors")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class ThemeResponse(BaseModel):
    id: uuid.UUID
    name: str
    colors: ThemeColors
    logo_url: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ThemeTemplate(BaseModel):
    name: str
    description: str
    colors: ThemeColors
