"""Tagged icon reference: a registry symbol or an image URL."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

from portal.services.icons import is_known_icon

IMAGE_URL_PREFIXES = ("http://", "https://", "/objects/")


class SymbolIcon(BaseModel):
    kind: Literal["symbol"] = "symbol"
    name: str = Field(..., min_length=1, max_length=64)

    @field_validator("name")
    @classmethod
    def validate_registered(cls, v: str) -> str:
        if not is_known_icon(v):
            raise ValueError(f"Unknown icon name: {v}")
        return v


class ImageIcon(BaseModel):
    kind: Literal["image"] = "image"
    url: str = Field(..., min_length=1, max_length=2048)

    @field_validator("url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        if not v.startswith(IMAGE_URL_PREFIXES):
            raise ValueError("Image icon url must be http(s) or an /objects/ path")
        return v


IconRef = Annotated[SymbolIcon | ImageIcon, Field(discriminator="kind")]


def classify_icon_url(value: str | None) -> dict | None:
    """Turn a legacy untagged ``icon_url`` string into a tagged icon payload."""
    if not value:
        return None
    if value.startswith(("http", "/objects")):
        return {"kind": "image", "url": value}
    return {"kind": "symbol", "name": value}


def icon_to_columns(icon: dict | None) -> dict[str, str | None]:
    """Flatten a dumped icon into the ``icon_kind`` / ``icon_value`` column pair."""
    if icon is None:
        return {"icon_kind": None, "icon_value": None}
    value = icon["name"] if icon["kind"] == "symbol" else icon["url"]
    return {"icon_kind": icon["kind"], "icon_value": value}


def icon_from_columns(kind: str | None, value: str | None) -> dict | None:
    if kind is None or value is None:
        return None
    if kind == "symbol":
        return {"kind": "symbol", "name": value}
    return {"kind": "image", "url": value}


def accept_legacy_icon_url(data: Any) -> Any:
    """``mode="before"`` hook for write schemas: map ``icon_url`` onto ``icon``."""
    if isinstance(data, dict) and "icon_url" in data:
        data = dict(data)
        legacy = data.pop("icon_url")
        data.setdefault("icon", classify_icon_url(legacy))
    return data


def unpack_icon_columns(data: Any, fields: dict) -> Any:
    """``mode="before"`` hook for read schemas built from ORM rows."""
    if isinstance(data, dict) or not hasattr(data, "icon_kind"):
        return data
    values = {name: getattr(data, name) for name in fields if name != "icon"}
    values["icon"] = icon_from_columns(data.icon_kind, data.icon_value)
    return values
