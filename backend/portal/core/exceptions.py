"""RFC 7807 Problem Details error handling and content-model errors."""

import logging
import uuid

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PortalError(Exception):
    """Base for content-store rule violations. Subclasses pin the HTTP status."""

    status = 400
    title = "Bad Request"


class EntityNotFoundError(PortalError):
    status = 404
    title = "Not Found"

    def __init__(self, entity: str, entity_id: uuid.UUID):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidReferenceError(PortalError):
    """A write points at an entity that does not exist."""

    title = "Invalid Reference"


class InvalidParentError(InvalidReferenceError):
    """Parent is missing, is the subsite itself, or is one of its descendants."""

    title = "Invalid Parent"


class TreeDepthExceededError(PortalError):
    """Parent chain is cyclic or deeper than MAX_TREE_DEPTH."""

    title = "Tree Depth Exceeded"


class ObjectNotFoundError(PortalError):
    status = 404
    title = "Not Found"


class ObjectAccessDeniedError(PortalError):
    status = 403
    title = "Forbidden"


class InvalidUploadError(PortalError):
    """Uploaded object failed post-upload checks and has been removed."""

    title = "Invalid Upload"


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content={
            "type": "about:blank",
            "title": exc.title,
            "status": exc.status,
            "detail": str(exc),
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "about:blank",
            "title": exc.detail if isinstance(exc.detail, str) else "Error",
            "status": exc.status_code,
            "detail": exc.detail,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "type": "about:blank",
            "title": "Validation Error",
            "status": 422,
            "detail": jsonable_errors(exc),
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "An unexpected error occurred",
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Pydantic error dicts may carry the raw exception in ``ctx``; stringify it."""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors
