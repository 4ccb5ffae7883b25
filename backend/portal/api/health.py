"""Health check endpoint."""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import text

from portal.db.session import engine

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


@router.get("/health")
async def health_check(request: Request):
    """Report store connectivity. The memory backend is always ``ok``."""
    if getattr(request.app.state, "memory_store", None) is not None:
        return {"status": "ok", "store": "memory", "db": "skipped", "version": VERSION}

    db_status = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        db_status = "error"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "store": "database",
        "db": db_status,
        "version": VERSION,
    }
