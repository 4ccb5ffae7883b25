"""Analytics event and aggregate schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

EventType = Literal["view", "click"]
ResourceType = Literal["subsite", "link"]


class TrackEventRequest(BaseModel):
    event_type: EventType
    resource_type: ResourceType
    resource_id: uuid.UUID


class AnalyticsEventResponse(BaseModel):
    id: uuid.UUID
    event_type: EventType
    resource_type: ResourceType
    resource_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class AnalyticsSummary(BaseModel):
    subsite_views: int
    link_clicks: int
    total_events: int


class TopSubsiteItem(BaseModel):
    id: uuid.UUID
    name: str
    views: int


class TopLinkItem(BaseModel):
    id: uuid.UUID
    name: str
    clicks: int
