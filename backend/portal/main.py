"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.objects import public_router as objects_public_router
from portal.api.router import api_router
from portal.core.config import settings
from portal.core.exceptions import (
    PortalError,
    http_exception_handler,
    portal_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from portal.core.logging import configure_logging
from portal.core.middleware.cors import get_cors_config
from portal.core.middleware.request_id import RequestIdMiddleware
from portal.db.session import engine
from portal.services.content_store import MemoryContentStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.STORE_BACKEND == "memory":
        app.state.memory_store = MemoryContentStore()
        logger.info("Using in-memory content store")
    try:
        yield
    finally:
        if getattr(app.state, "memory_store", None) is not None:
            app.state.memory_store.clear()
            app.state.memory_store = None
        await engine.dispose()


app = FastAPI(
    title="Portal Builder API",
    version="0.1.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Middleware (last added = first executed)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(CORSMiddleware, **get_cors_config())

# Exception handlers (RFC 7807)
app.add_exception_handler(PortalError, portal_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Routes
app.include_router(api_router, prefix="/api")
app.include_router(objects_public_router, tags=["objects"])
