from portal.models.analytics_event import AnalyticsEvent
from portal.models.link import Link
from portal.models.subsite import Subsite
from portal.models.theme import Theme

__all__ = [
    "AnalyticsEvent",
    "Link",
    "Subsite",
    "Theme",
]
