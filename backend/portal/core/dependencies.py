"""FastAPI dependency chain: request → session → content store."""

from collections.abc import AsyncGenerator

from fastapi import Request

from portal.db.session import async_session_factory
from portal.services.content_store import ContentStore, MemoryContentStore, SqlContentStore


async def get_store(request: Request) -> AsyncGenerator[ContentStore, None]:
    """Yield the configured content store.

    The memory backend is a single instance on ``app.state``. The database
    backend wraps a fresh session that commits on success and rolls back on
    error, so everything one request writes lands together or not at all.
    """
    memory_store: MemoryContentStore | None = getattr(request.app.state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return

    async with async_session_factory() as session:
        try:
            yield SqlContentStore(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
