"""CRUD endpoints for themes."""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from portal.core.dependencies import get_store
from portal.schemas.theme import ThemeCreate, ThemeResponse, ThemeTemplate, ThemeUpdate
from portal.services.content_store import ContentStore
from portal.services.theme_templates import THEME_TEMPLATES

router = APIRouter()


@router.get("", response_model=list[ThemeResponse])
async def list_themes(store: ContentStore = Depends(get_store)) -> list[ThemeResponse]:
    return await store.list_themes()


@router.get("/templates", response_model=list[ThemeTemplate])
async def list_theme_templates() -> list[ThemeTemplate]:
    """Preset palettes the client offers as starting points."""
    return [ThemeTemplate.model_validate(t) for t in THEME_TEMPLATES]


@router.post("", response_model=ThemeResponse, status_code=201)
async def create_theme(
    body: ThemeCreate,
    store: ContentStore = Depends(get_store),
) -> ThemeResponse:
    return await store.create_theme(body)


@router.get("/{theme_id}", response_model=ThemeResponse)
async def get_theme(
    theme_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> ThemeResponse:
    theme = await store.get_theme(theme_id)
    if theme is None:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.patch("/{theme_id}", response_model=ThemeResponse)
async def update_theme(
    theme_id: uuid.UUID,
    body: ThemeUpdate,
    store: ContentStore = Depends(get_store),
) -> ThemeResponse:
    theme = await store.update_theme(theme_id, body)
    if theme is None:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.delete("/{theme_id}", status_code=204)
async def delete_theme(
    theme_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> None:
    if not await store.delete_theme(theme_id):
        raise HTTPException(status_code=404, detail="Theme not found")
