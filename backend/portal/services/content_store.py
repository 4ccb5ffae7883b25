"""Content store: themes, subsites, links and the analytics event log.

Two backends share one contract:

* ``SqlContentStore`` wraps a request-scoped ``AsyncSession``. The session
  commits once when the request succeeds and rolls back on any exception
  (see ``get_store``), so multi-statement writes such as the subsite cascade
  delete and batch reorder are atomic.
* ``MemoryContentStore`` keeps everything in dicts owned by the instance.
  One instance lives on ``app.state`` when ``STORE_BACKEND=memory``; tests
  build their own.

Tree rules (parent existence, no cycles, bounded breadcrumb walk) live on the
abstract base so both backends enforce them identically.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from collections import Counter

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import (
    EntityNotFoundError,
    InvalidParentError,
    InvalidReferenceError,
    TreeDepthExceededError,
)
from portal.db.base import utcnow
from portal.models.analytics_event import AnalyticsEvent
from portal.models.link import Link
from portal.models.subsite import Subsite
from portal.models.theme import Theme
from portal.schemas.analytics import AnalyticsEventResponse
from portal.schemas.icon import icon_to_columns
from portal.schemas.link import LinkCreate, LinkResponse, LinkUpdate
from portal.schemas.subsite import SubsiteCreate, SubsiteResponse, SubsiteUpdate
from portal.schemas.theme import ThemeCreate, ThemeResponse, ThemeUpdate

logger = logging.getLogger(__name__)

MAX_TREE_DEPTH = 64


class ContentStore(ABC):
    # --- Themes ---

    @abstractmethod
    async def list_themes(self) -> list[ThemeResponse]: ...

    @abstractmethod
    async def get_theme(self, theme_id: uuid.UUID) -> ThemeResponse | None: ...

    @abstractmethod
    async def create_theme(self, data: ThemeCreate) -> ThemeResponse: ...

    @abstractmethod
    async def update_theme(self, theme_id: uuid.UUID, data: ThemeUpdate) -> ThemeResponse | None:
        ...

    @abstractmethod
    async def delete_theme(self, theme_id: uuid.UUID) -> bool: ...

    # --- Subsites ---

    @abstractmethod
    async def list_subsites(self) -> list[SubsiteResponse]:
        """All subsites, ascending by ``order``."""

    @abstractmethod
    async def get_subsite(self, subsite_id: uuid.UUID) -> SubsiteResponse | None: ...

    @abstractmethod
    async def get_child_subsites(self, parent_id: uuid.UUID) -> list[SubsiteResponse]: ...

    @abstractmethod
    async def delete_subsite(self, subsite_id: uuid.UUID) -> bool:
        """Delete the subsite's links, then the subsite. Child subsites are left in place."""

    @abstractmethod
    async def reorder_subsites(self, ids: list[uuid.UUID]) -> list[SubsiteResponse]:
        """Set ``order = index`` for every id. Unknown ids abort the whole call."""

    @abstractmethod
    async def _insert_subsite(self, data: SubsiteCreate) -> SubsiteResponse: ...

    @abstractmethod
    async def _apply_subsite_update(self, subsite_id: uuid.UUID, changes: dict) -> SubsiteResponse:
        ...

    async def create_subsite(self, data: SubsiteCreate) -> SubsiteResponse:
        if data.parent_id is not None:
            await self.validate_parent(None, data.parent_id)
        subsite = await self._insert_subsite(data)
        logger.info("Created subsite %s (parent=%s)", subsite.id, subsite.parent_id)
        return subsite

    async def update_subsite(
        self, subsite_id: uuid.UUID, data: SubsiteUpdate
    ) -> SubsiteResponse | None:
        if await self.get_subsite(subsite_id) is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if changes.get("parent_id") is not None:
            await self.validate_parent(subsite_id, changes["parent_id"])
        return await self._apply_subsite_update(subsite_id, changes)

    # --- Links ---

    @abstractmethod
    async def list_links(self) -> list[LinkResponse]:
        """All links, ascending by ``order``."""

    @abstractmethod
    async def get_links_by_subsite(self, subsite_id: uuid.UUID) -> list[LinkResponse]: ...

    @abstractmethod
    async def get_link(self, link_id: uuid.UUID) -> LinkResponse | None: ...

    @abstractmethod
    async def delete_link(self, link_id: uuid.UUID) -> bool: ...

    @abstractmethod
    async def reorder_links(
        self, subsite_id: uuid.UUID, ids: list[uuid.UUID]
    ) -> list[LinkResponse]:
        """Set ``order = index`` for links of one subsite. Foreign or unknown ids abort."""

    @abstractmethod
    async def _insert_link(self, data: LinkCreate) -> LinkResponse: ...

    @abstractmethod
    async def _apply_link_update(self, link_id: uuid.UUID, changes: dict) -> LinkResponse: ...

    async def create_link(self, data: LinkCreate) -> LinkResponse:
        await self._require_subsite(data.subsite_id)
        link = await self._insert_link(data)
        logger.info("Created link %s in subsite %s", link.id, link.subsite_id)
        return link

    async def update_link(self, link_id: uuid.UUID, data: LinkUpdate) -> LinkResponse | None:
        if await self.get_link(link_id) is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if "subsite_id" in changes:
            await self._require_subsite(changes["subsite_id"])
        return await self._apply_link_update(link_id, changes)

    # --- Analytics event log ---

    @abstractmethod
    async def add_event(
        self, event_type: str, resource_type: str, resource_id: uuid.UUID
    ) -> AnalyticsEventResponse: ...

    @abstractmethod
    async def count_events(self, event_type: str, resource_type: str) -> int: ...

    @abstractmethod
    async def count_all_events(self) -> int: ...

    @abstractmethod
    async def count_by_resource(
        self, event_type: str, resource_type: str, limit: int
    ) -> list[tuple[uuid.UUID, int]]:
        """(resource_id, count) pairs, highest count first."""

    @abstractmethod
    async def recent_events(self, limit: int) -> list[AnalyticsEventResponse]: ...

    # --- Tree logic ---

    async def get_breadcrumb_trail(self, subsite_id: uuid.UUID) -> list[SubsiteResponse]:
        """Path from the root ancestor down to ``subsite_id`` (inclusive).

        The walk stops at the first id that no longer resolves, so an orphan
        whose parent was deleted becomes the root of its own trail.
        """
        trail: list[SubsiteResponse] = []
        current_id: uuid.UUID | None = subsite_id
        while current_id is not None:
            subsite = await self.get_subsite(current_id)
            if subsite is None:
                break
            if len(trail) >= MAX_TREE_DEPTH:
                raise TreeDepthExceededError(
                    f"Parent chain of subsite {subsite_id} exceeds {MAX_TREE_DEPTH} levels"
                )
            trail.append(subsite)
            current_id = subsite.parent_id
        trail.reverse()
        return trail

    async def validate_parent(self, subsite_id: uuid.UUID | None, parent_id: uuid.UUID) -> None:
        """Reject a parent that is missing or would put ``subsite_id`` inside its own subtree."""
        if subsite_id is not None and parent_id == subsite_id:
            raise InvalidParentError("A subsite cannot be its own parent")

        parent = await self.get_subsite(parent_id)
        if parent is None:
            raise InvalidParentError(f"Parent subsite {parent_id} not found")

        depth = 1
        ancestor: SubsiteResponse | None = parent
        while ancestor is not None:
            if subsite_id is not None and ancestor.id == subsite_id:
                raise InvalidParentError(
                    f"Subsite {parent_id} is a descendant of {subsite_id}; "
                    "moving would create a cycle"
                )
            if depth >= MAX_TREE_DEPTH:
                raise TreeDepthExceededError(f"Subsite tree may not exceed {MAX_TREE_DEPTH} levels")
            if ancestor.parent_id is None:
                break
            ancestor = await self.get_subsite(ancestor.parent_id)
            if ancestor is not None:
                depth += 1

        # A moved subsite brings its descendants along
        height = 1
        if subsite_id is not None:
            height = await self._subtree_height(subsite_id, MAX_TREE_DEPTH - depth)
        if depth + height > MAX_TREE_DEPTH:
            raise TreeDepthExceededError(f"Subsite tree may not exceed {MAX_TREE_DEPTH} levels")

    async def _subtree_height(self, subsite_id: uuid.UUID, limit: int) -> int:
        """Levels in the subtree rooted at ``subsite_id``; stops counting past ``limit``."""
        height = 0
        frontier = [subsite_id]
        while frontier and height <= limit:
            height += 1
            next_level: list[uuid.UUID] = []
            for node_id in frontier:
                next_level.extend(c.id for c in await self.get_child_subsites(node_id))
            frontier = next_level
        return height

    async def discard_pending(self) -> None:
        """Drop uncommitted writes after a swallowed failure. No-op by default."""

    async def _require_subsite(self, subsite_id: uuid.UUID) -> None:
        if await self.get_subsite(subsite_id) is None:
            raise InvalidReferenceError(f"Subsite {subsite_id} not found")


def _to_columns(values: dict) -> dict:
    if "icon" in values:
        values = dict(values)
        values.update(icon_to_columns(values.pop("icon")))
    return values


class SqlContentStore(ContentStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def discard_pending(self) -> None:
        await self.session.rollback()

    async def _refreshed(self, row):
        await self.session.flush()
        await self.session.refresh(row)
        return row

    # --- Themes ---

    async def list_themes(self) -> list[ThemeResponse]:
        result = await self.session.execute(select(Theme).order_by(Theme.created_at, Theme.id))
        return [ThemeResponse.model_validate(t) for t in result.scalars().all()]

    async def get_theme(self, theme_id: uuid.UUID) -> ThemeResponse | None:
        theme = await self.session.get(Theme, theme_id)
        return ThemeResponse.model_validate(theme) if theme else None

    async def create_theme(self, data: ThemeCreate) -> ThemeResponse:
        theme = Theme(**data.model_dump())
        self.session.add(theme)
        theme = await self._refreshed(theme)
        logger.info("Created theme %s", theme.id)
        return ThemeResponse.model_validate(theme)

    async def update_theme(self, theme_id: uuid.UUID, data: ThemeUpdate) -> ThemeResponse | None:
        theme = await self.session.get(Theme, theme_id)
        if theme is None:
            return None
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(theme, field, value)
        return ThemeResponse.model_validate(await self._refreshed(theme))

    async def delete_theme(self, theme_id: uuid.UUID) -> bool:
        result = await self.session.execute(delete(Theme).where(Theme.id == theme_id))
        return result.rowcount > 0

    # --- Subsites ---

    async def list_subsites(self) -> list[SubsiteResponse]:
        stmt = select(Subsite).order_by(Subsite.order, Subsite.created_at, Subsite.id)
        result = await self.session.execute(stmt)
        return [SubsiteResponse.model_validate(s) for s in result.scalars().all()]

    async def get_subsite(self, subsite_id: uuid.UUID) -> SubsiteResponse | None:
        subsite = await self.session.get(Subsite, subsite_id)
        return SubsiteResponse.model_validate(subsite) if subsite else None

    async def get_child_subsites(self, parent_id: uuid.UUID) -> list[SubsiteResponse]:
        stmt = (
            select(Subsite)
            .where(Subsite.parent_id == parent_id)
            .order_by(Subsite.order, Subsite.created_at, Subsite.id)
        )
        result = await self.session.execute(stmt)
        return [SubsiteResponse.model_validate(s) for s in result.scalars().all()]

    async def _insert_subsite(self, data: SubsiteCreate) -> SubsiteResponse:
        subsite = Subsite(**_to_columns(data.model_dump()))
        self.session.add(subsite)
        return SubsiteResponse.model_validate(await self._refreshed(subsite))

    async def _apply_subsite_update(self, subsite_id: uuid.UUID, changes: dict) -> SubsiteResponse:
        subsite = await self.session.get(Subsite, subsite_id)
        for field, value in _to_columns(changes).items():
            setattr(subsite, field, value)
        return SubsiteResponse.model_validate(await self._refreshed(subsite))

    async def delete_subsite(self, subsite_id: uuid.UUID) -> bool:
        # Links first: links.subsite_id is a foreign key to subsites.id
        links = await self.session.execute(delete(Link).where(Link.subsite_id == subsite_id))
        result = await self.session.execute(delete(Subsite).where(Subsite.id == subsite_id))
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted subsite %s and %d link(s)", subsite_id, links.rowcount)
        return deleted

    async def reorder_subsites(self, ids: list[uuid.UUID]) -> list[SubsiteResponse]:
        result = await self.session.execute(select(Subsite).where(Subsite.id.in_(ids)))
        rows = {s.id: s for s in result.scalars().all()}
        for subsite_id in ids:
            if subsite_id not in rows:
                raise EntityNotFoundError("Subsite", subsite_id)
        for index, subsite_id in enumerate(ids):
            rows[subsite_id].order = index
        await self.session.flush()
        for row in rows.values():
            await self.session.refresh(row)
        logger.info("Reordered %d subsite(s)", len(ids))
        return [SubsiteResponse.model_validate(rows[i]) for i in ids]

    # --- Links ---

    async def list_links(self) -> list[LinkResponse]:
        stmt = select(Link).order_by(Link.order, Link.created_at, Link.id)
        result = await self.session.execute(stmt)
        return [LinkResponse.model_validate(link) for link in result.scalars().all()]

    async def get_links_by_subsite(self, subsite_id: uuid.UUID) -> list[LinkResponse]:
        stmt = (
            select(Link)
            .where(Link.subsite_id == subsite_id)
            .order_by(Link.order, Link.created_at, Link.id)
        )
        result = await self.session.execute(stmt)
        return [LinkResponse.model_validate(link) for link in result.scalars().all()]

    async def get_link(self, link_id: uuid.UUID) -> LinkResponse | None:
        link = await self.session.get(Link, link_id)
        return LinkResponse.model_validate(link) if link else None

    async def _insert_link(self, data: LinkCreate) -> LinkResponse:
        link = Link(**_to_columns(data.model_dump()))
        self.session.add(link)
        return LinkResponse.model_validate(await self._refreshed(link))

    async def _apply_link_update(self, link_id: uuid.UUID, changes: dict) -> LinkResponse:
        link = await self.session.get(Link, link_id)
        for field, value in _to_columns(changes).items():
            setattr(link, field, value)
        return LinkResponse.model_validate(await self._refreshed(link))

    async def delete_link(self, link_id: uuid.UUID) -> bool:
        result = await self.session.execute(delete(Link).where(Link.id == link_id))
        return result.rowcount > 0

    async def reorder_links(
        self, subsite_id: uuid.UUID, ids: list[uuid.UUID]
    ) -> list[LinkResponse]:
        stmt = select(Link).where(Link.id.in_(ids), Link.subsite_id == subsite_id)
        result = await self.session.execute(stmt)
        rows = {link.id: link for link in result.scalars().all()}
        for link_id in ids:
            if link_id not in rows:
                raise EntityNotFoundError("Link", link_id)
        for index, link_id in enumerate(ids):
            rows[link_id].order = index
        await self.session.flush()
        for row in rows.values():
            await self.session.refresh(row)
        logger.info("Reordered %d link(s) in subsite %s", len(ids), subsite_id)
        return [LinkResponse.model_validate(rows[i]) for i in ids]

    # --- Analytics event log ---

    async def add_event(
        self, event_type: str, resource_type: str, resource_id: uuid.UUID
    ) -> AnalyticsEventResponse:
        event = AnalyticsEvent(
            id=uuid.uuid4(),
            event_type=event_type,
            resource_type=resource_type,
            resource_id=resource_id,
            created_at=utcnow(),
        )
        self.session.add(event)
        await self.session.flush()
        return AnalyticsEventResponse.model_validate(event)

    async def count_events(self, event_type: str, resource_type: str) -> int:
        stmt = select(func.count(AnalyticsEvent.id)).where(
            AnalyticsEvent.event_type == event_type,
            AnalyticsEvent.resource_type == resource_type,
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def count_all_events(self) -> int:
        stmt = select(func.count(AnalyticsEvent.id))
        return (await self.session.execute(stmt)).scalar_one()

    async def count_by_resource(
        self, event_type: str, resource_type: str, limit: int
    ) -> list[tuple[uuid.UUID, int]]:
        hits = func.count(AnalyticsEvent.id).label("hits")
        stmt = (
            select(AnalyticsEvent.resource_id, hits)
            .where(
                AnalyticsEvent.event_type == event_type,
                AnalyticsEvent.resource_type == resource_type,
            )
            .group_by(AnalyticsEvent.resource_id)
            .order_by(desc(hits), func.min(AnalyticsEvent.created_at))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row.resource_id, row.hits) for row in result.all()]

    async def recent_events(self, limit: int) -> list[AnalyticsEventResponse]:
        stmt = select(AnalyticsEvent).order_by(AnalyticsEvent.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return [AnalyticsEventResponse.model_validate(e) for e in result.scalars().all()]


def _copy(item):
    """Detached deep copy, so callers never hold the instance kept in the store."""
    return item.model_copy(deep=True) if item is not None else None


class MemoryContentStore(ContentStore):
    """Dict-backed store. Dict insertion order breaks ``order`` ties.

    Every read and write hands back a copy of the stored model.
    """

    def __init__(self) -> None:
        self._themes: dict[uuid.UUID, ThemeResponse] = {}
        self._subsites: dict[uuid.UUID, SubsiteResponse] = {}
        self._links: dict[uuid.UUID, LinkResponse] = {}
        self._events: list[AnalyticsEventResponse] = []

    def clear(self) -> None:
        self._themes.clear()
        self._subsites.clear()
        self._links.clear()
        self._events.clear()

    # --- Themes ---

    async def list_themes(self) -> list[ThemeResponse]:
        return [_copy(t) for t in self._themes.values()]

    async def get_theme(self, theme_id: uuid.UUID) -> ThemeResponse | None:
        return _copy(self._themes.get(theme_id))

    async def create_theme(self, data: ThemeCreate) -> ThemeResponse:
        theme = ThemeResponse(id=uuid.uuid4(), created_at=utcnow(), **data.model_dump())
        self._themes[theme.id] = theme
        logger.info("Created theme %s", theme.id)
        return _copy(theme)

    async def update_theme(self, theme_id: uuid.UUID, data: ThemeUpdate) -> ThemeResponse | None:
        theme = self._themes.get(theme_id)
        if theme is None:
            return None
        updated = ThemeResponse.model_validate(
            {**theme.model_dump(), **data.model_dump(exclude_unset=True), "updated_at": utcnow()}
        )
        self._themes[theme_id] = updated
        return _copy(updated)

    async def delete_theme(self, theme_id: uuid.UUID) -> bool:
        return self._themes.pop(theme_id, None) is not None

    # --- Subsites ---

    async def list_subsites(self) -> list[SubsiteResponse]:
        return [_copy(s) for s in sorted(self._subsites.values(), key=lambda s: s.order)]

    async def get_subsite(self, subsite_id: uuid.UUID) -> SubsiteResponse | None:
        return _copy(self._subsites.get(subsite_id))

    async def get_child_subsites(self, parent_id: uuid.UUID) -> list[SubsiteResponse]:
        children = [s for s in self._subsites.values() if s.parent_id == parent_id]
        return [_copy(s) for s in sorted(children, key=lambda s: s.order)]

    async def _insert_subsite(self, data: SubsiteCreate) -> SubsiteResponse:
        subsite = SubsiteResponse.model_validate(
            {**data.model_dump(), "id": uuid.uuid4(), "created_at": utcnow()}
        )
        self._subsites[subsite.id] = subsite
        return _copy(subsite)

    async def _apply_subsite_update(self, subsite_id: uuid.UUID, changes: dict) -> SubsiteResponse:
        current = self._subsites[subsite_id]
        updated = SubsiteResponse.model_validate(
            {**current.model_dump(), **changes, "updated_at": utcnow()}
        )
        self._subsites[subsite_id] = updated
        return _copy(updated)

    async def delete_subsite(self, subsite_id: uuid.UUID) -> bool:
        if subsite_id not in self._subsites:
            return False
        doomed = [link_id for link_id, link in self._links.items() if link.subsite_id == subsite_id]
        for link_id in doomed:
            del self._links[link_id]
        del self._subsites[subsite_id]
        logger.info("Deleted subsite %s and %d link(s)", subsite_id, len(doomed))
        return True

    async def reorder_subsites(self, ids: list[uuid.UUID]) -> list[SubsiteResponse]:
        for subsite_id in ids:
            if subsite_id not in self._subsites:
                raise EntityNotFoundError("Subsite", subsite_id)
        now = utcnow()
        for index, subsite_id in enumerate(ids):
            self._subsites[subsite_id] = self._subsites[subsite_id].model_copy(
                update={"order": index, "updated_at": now}
            )
        logger.info("Reordered %d subsite(s)", len(ids))
        return [_copy(self._subsites[i]) for i in ids]

    # --- Links ---

    async def list_links(self) -> list[LinkResponse]:
        links = sorted(self._links.values(), key=lambda link: link.order)
        return [_copy(link) for link in links]

    async def get_links_by_subsite(self, subsite_id: uuid.UUID) -> list[LinkResponse]:
        links = [link for link in self._links.values() if link.subsite_id == subsite_id]
        return [_copy(link) for link in sorted(links, key=lambda link: link.order)]

    async def get_link(self, link_id: uuid.UUID) -> LinkResponse | None:
        return _copy(self._links.get(link_id))

    async def _insert_link(self, data: LinkCreate) -> LinkResponse:
        link = LinkResponse.model_validate(
            {**data.model_dump(), "id": uuid.uuid4(), "created_at": utcnow()}
        )
        self._links[link.id] = link
        return _copy(link)

    async def _apply_link_update(self, link_id: uuid.UUID, changes: dict) -> LinkResponse:
        current = self._links[link_id]
        updated = LinkResponse.model_validate(
            {**current.model_dump(), **changes, "updated_at": utcnow()}
        )
        self._links[link_id] = updated
        return _copy(updated)

    async def delete_link(self, link_id: uuid.UUID) -> bool:
        return self._links.pop(link_id, None) is not None

    async def reorder_links(
        self, subsite_id: uuid.UUID, ids: list[uuid.UUID]
    ) -> list[LinkResponse]:
        for link_id in ids:
            link = self._links.get(link_id)
            if link is None or link.subsite_id != subsite_id:
                raise EntityNotFoundError("Link", link_id)
        now = utcnow()
        for index, link_id in enumerate(ids):
            self._links[link_id] = self._links[link_id].model_copy(
                update={"order": index, "updated_at": now}
            )
        logger.info("Reordered %d link(s) in subsite %s", len(ids), subsite_id)
        return [_copy(self._links[i]) for i in ids]

    # --- Analytics event log ---

    async def add_event(
        self, event_type: str, resource_type: str, resource_id: uuid.UUID
    ) -> AnalyticsEventResponse:
        event = AnalyticsEventResponse(
            id=uuid.uuid4(),
            event_type=event_type,
            resource_type=resource_type,
            resource_id=resource_id,
            created_at=utcnow(),
        )
        self._events.append(event)
        return _copy(event)

    async def count_events(self, event_type: str, resource_type: str) -> int:
        return sum(
            1
            for e in self._events
            if e.event_type == event_type and e.resource_type == resource_type
        )

    async def count_all_events(self) -> int:
        return len(self._events)

    async def count_by_resource(
        self, event_type: str, resource_type: str, limit: int
    ) -> list[tuple[uuid.UUID, int]]:
        counts = Counter(
            e.resource_id
            for e in self._events
            if e.event_type == event_type and e.resource_type == resource_type
        )
        return counts.most_common(limit)

    async def recent_events(self, limit: int) -> list[AnalyticsEventResponse]:
        # Appended in time order, so newest-first is the reversed log
        return [_copy(e) for e in list(reversed(self._events))[:limit]]
