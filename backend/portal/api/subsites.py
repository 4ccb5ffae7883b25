"""CRUD + tree endpoints for subsites."""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from portal.core.dependencies import get_store
from portal.schemas.common import ReorderRequest
from portal.schemas.link import LinkResponse
from portal.schemas.subsite import SubsiteCreate, SubsiteResponse, SubsiteUpdate
from portal.services import analytics
from portal.services.content_store import ContentStore

router = APIRouter()


async def _get_or_404(store: ContentStore, subsite_id: uuid.UUID) -> SubsiteResponse:
    subsite = await store.get_subsite(subsite_id)
    if subsite is None:
        raise HTTPException(status_code=404, detail="Subsite not found")
    return subsite


@router.get("", response_model=list[SubsiteResponse])
async def list_subsites(store: ContentStore = Depends(get_store)) -> list[SubsiteResponse]:
    return await store.list_subsites()


@router.post("", response_model=SubsiteResponse, status_code=201)
async def create_subsite(
    body: SubsiteCreate,
    store: ContentStore = Depends(get_store),
) -> SubsiteResponse:
    return await store.create_subsite(body)


@router.post("/reorder", response_model=list[SubsiteResponse])
async def reorder_subsites(
    body: ReorderRequest,
    store: ContentStore = Depends(get_store),
) -> list[SubsiteResponse]:
    """Assign ``order`` 0..n-1 following ``ids`` in one transaction."""
    return await store.reorder_subsites(body.ids)


@router.get("/{subsite_id}", response_model=SubsiteResponse)
async def get_subsite(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> SubsiteResponse:
    return await _get_or_404(store, subsite_id)


@router.patch("/{subsite_id}", response_model=SubsiteResponse)
async def update_subsite(
    subsite_id: uuid.UUID,
    body: SubsiteUpdate,
    store: ContentStore = Depends(get_store),
) -> SubsiteResponse:
    subsite = await store.update_subsite(subsite_id, body)
    if subsite is None:
        raise HTTPException(status_code=404, detail="Subsite not found")
    return subsite


@router.delete("/{subsite_id}", status_code=204)
async def delete_subsite(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> None:
    """Delete a subsite and its links. Child subsites stay, orphaned."""
    if not await store.delete_subsite(subsite_id):
        raise HTTPException(status_code=404, detail="Subsite not found")


@router.post("/{subsite_id}/view", response_model=SubsiteResponse)
async def view_subsite(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> SubsiteResponse:
    """Fetch a subsite for display and record a view.

    A tracking failure is logged and never fails the page load.
    """
    subsite = await _get_or_404(store, subsite_id)
    await analytics.track_event(store, "view", "subsite", subsite_id, swallow_errors=True)
    return subsite


@router.get("/{subsite_id}/children", response_model=list[SubsiteResponse])
async def list_child_subsites(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> list[SubsiteResponse]:
    return await store.get_child_subsites(subsite_id)


@router.get("/{subsite_id}/breadcrumb", response_model=list[SubsiteResponse])
async def get_breadcrumb(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> list[SubsiteResponse]:
    """Ancestors from the root down to this subsite (inclusive)."""
    await _get_or_404(store, subsite_id)
    return await store.get_breadcrumb_trail(subsite_id)


@router.get("/{subsite_id}/links", response_model=list[LinkResponse])
async def list_subsite_links(
    subsite_id: uuid.UUID,
    store: ContentStore = Depends(get_store),
) -> list[LinkResponse]:
    return await store.get_links_by_subsite(subsite_id)


@router.post("/{subsite_id}/links/reorder", response_model=list[LinkResponse])
async def reorder_subsite_links(
    subsite_id: uuid.UUID,
    body: ReorderRequest,
    store: ContentStore = Depends(get_store),
) -> list[LinkResponse]:
    await _get_or_404(store, subsite_id)
    return await store.reorder_links(subsite_id, body.ids)
