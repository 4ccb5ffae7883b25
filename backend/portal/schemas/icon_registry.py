"""Icon registry response schemas."""

from pydantic import BaseModel


class IconResponse(BaseModel):
    name: str
    keywords: list[str]

    model_config = {"from_attributes": True}


class IconCategoryResponse(BaseModel):
    name: str
    description: str
    icons: list[IconResponse]

    model_config = {"from_attributes": True}
