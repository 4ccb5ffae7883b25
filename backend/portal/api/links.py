"""CRUD endpoints for links."""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from portal.core.dependencies import get_store
from portal.schemas.link import LinkCreate, LinkResponse, LinkUpdate
from portal.services.content_store import ContentStore

router = APIRouter()


@router.get("", response_model=list[LinkResponse])
async def list_links(store: ContentStore = Depends(get_store)) -> list[LinkResponse]:
    return await store.list_links()


@router.post("", response_model=LinkResponse, status_code=201)
async def create_link(
    body: LinkCreate,
    store: ContentStore = Depends(get_store),
) -> LinkResponse:
    return await store.create_link(body)


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(
    link_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> LinkResponse:
    link = await store.get_link(link_id)
    if link is None:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


@router.patch("/{link_id}", response_model=LinkResponse)
async def update_link(
    link_id: uuid.UUID,
    body: LinkUpdate,
    store: ContentStore = Depends(get_store),
) -> LinkResponse:
    link = await store.update_link(link_id, body)
    if link is None:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


@router.delete("/{link_id}", status_code=204)
async def delete_link(
    link_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> None:
    if not await store.delete_link(link_id):
        raise HTTPException(status_code=404, detail="Link not found")
