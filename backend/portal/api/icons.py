"""Read-only icon registry for the client's icon picker."""

from fastapi import APIRouter, Query

from portal.schemas.icon_registry import IconCategoryResponse, IconResponse
from portal.services.icons import ICON_CATEGORIES, search_icons

router = APIRouter()


@router.get("", response_model=list[IconResponse])
async def list_icons(q: str = Query("", max_length=100)) -> list[IconResponse]:
    return [IconResponse.model_validate(icon) for icon in search_icons(q)]


@router.get("/categories", response_model=list[IconCategoryResponse])
async def list_icon_categories() -> list[IconCategoryResponse]:
    return [IconCategoryResponse.model_validate(c) for c in ICON_CATEGORIES]
