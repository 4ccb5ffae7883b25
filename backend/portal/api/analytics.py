"""Analytics tracking and aggregate endpoints."""

from fastapi import APIRouter, Depends, Query

from portal.core.dependencies import get_store
from portal.schemas.analytics import (
    AnalyticsEventResponse,
    AnalyticsSummary,
    TopLinkItem,
    TopSubsiteItem,
    TrackEventRequest,
)
from portal.services import analytics
from portal.services.content_store import ContentStore

router = APIRouter()


@router.post("/track", response_model=AnalyticsEventResponse, status_code=201)
async def track_event(
    body: TrackEventRequest,
    store: ContentStore = Depends(get_store),
) -> AnalyticsEventResponse:
    return await analytics.track_event(
        store, body.event_type, body.resource_type, body.resource_id
    )


@router.get("/summary", response_model=AnalyticsSummary)
async def get_summary(store: ContentStore = Depends(get_store)) -> AnalyticsSummary:
    return await analytics.get_summary(store)


@router.get("/top-subsites", response_model=list[TopSubsiteItem])
async def get_top_subsites(
    limit: int = Query(analytics.DEFAULT_TOP_LIMIT, ge=1, le=100),
    store: ContentStore = Depends(get_store),
) -> list[TopSubsiteItem]:
    return await analytics.get_top_subsites(store, limit)


@router.get("/top-links", response_model=list[TopLinkItem])
async def get_top_links(
    limit: int = Query(analytics.DEFAULT_TOP_LIMIT, ge=1, le=100),
    store: ContentStore = Depends(get_store),
) -> list[TopLinkItem]:
    return await analytics.get_top_links(store, limit)


@router.get("/recent", response_model=list[AnalyticsEventResponse])
async def get_recent_activity(
    limit: int = Query(analytics.DEFAULT_RECENT_LIMIT, ge=1, le=200),
    store: ContentStore = Depends(get_store),
) -> list[AnalyticsEventResponse]:
    return await analytics.get_recent_activity(store, limit)
