"""View/click analytics on top of the content store's event log."""

import logging
import uuid

from portal.schemas.analytics import (
    AnalyticsEventResponse,
    AnalyticsSummary,
    TopLinkItem,
    TopSubsiteItem,
)
from portal.services.content_store import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 5
DEFAULT_RECENT_LIMIT = 10

DELETED_SUBSITE_NAME = "Deleted subsite"
DELETED_LINK_NAME = "Deleted link"


async def track_event(
    store: ContentStore,
    event_type: str,
    resource_type: str,
    resource_id: uuid.UUID,
    *,
    swallow_errors: bool = False,
) -> AnalyticsEventResponse | None:
    """Append one event.

    With ``swallow_errors`` the call is fire-and-forget: storage failures are
    logged and ``None`` is returned so the triggering request still succeeds.
    """
    if not swallow_errors:
        return await store.add_event(event_type, resource_type, resource_id)
    try:
        return await store.add_event(event_type, resource_type, resource_id)
    except Exception:
        await store.discard_pending()
        logger.warning(
            "Failed to track %s event for %s %s",
            event_type,
            resource_type,
            resource_id,
            exc_info=True,
        )
        return None


async def get_summary(store: ContentStore) -> AnalyticsSummary:
    return AnalyticsSummary(
        subsite_views=await store.count_events("view", "subsite"),
        link_clicks=await store.count_events("click", "link"),
        total_events=await store.count_all_events(),
    )


async def get_top_subsites(
    store: ContentStore, limit: int = DEFAULT_TOP_LIMIT
) -> list[TopSubsiteItem]:
    items = []
    for resource_id, views in await store.count_by_resource("view", "subsite", limit):
        subsite = await store.get_subsite(resource_id)
        name = subsite.name if subsite else DELETED_SUBSITE_NAME
        items.append(TopSubsiteItem(id=resource_id, name=name, views=views))
    return items


async def get_top_links(store: ContentStore, limit: int = DEFAULT_TOP_LIMIT) -> list[TopLinkItem]:
    items = []
    for resource_id, clicks in await store.count_by_resource("click", "link", limit):
        link = await store.get_link(resource_id)
        name = link.name if link else DELETED_LINK_NAME
        items.append(TopLinkItem(id=resource_id, name=name, clicks=clicks))
    return items


async def get_recent_activity(
    store: ContentStore, limit: int = DEFAULT_RECENT_LIMIT
) -> list[AnalyticsEventResponse]:
    return await store.recent_events(limit)
