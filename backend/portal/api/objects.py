"""Image upload flow: presigned upload target → finalize → serve.

The browser PUTs the file straight to object storage; ``PUT /api/images``
then validates what actually landed and marks it public.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

from portal.core.exceptions import ObjectAccessDeniedError
from portal.schemas.objects import (
    ImageFinalizeRequest,
    ImageFinalizeResponse,
    UploadTargetResponse,
)
from portal.services.storage import (
    PRESIGN_UPLOAD_EXPIRES,
    build_upload_key,
    finalize_image,
    is_public,
    object_key_from_url,
    object_path,
    presign_get,
    presign_put,
)

router = APIRouter()
public_router = APIRouter()


@router.post("/objects/upload", response_model=UploadTargetResponse)
async def create_upload_target() -> UploadTargetResponse:
    key = build_upload_key()
    return UploadTargetResponse(
        upload_url=presign_put(key),
        object_path=object_path(key),
        expires_in=PRESIGN_UPLOAD_EXPIRES,
    )


@router.put("/images", response_model=ImageFinalizeResponse)
def finalize_uploaded_image(body: ImageFinalizeRequest) -> ImageFinalizeResponse:
    # Sync handler: boto3 calls block, so FastAPI runs this in its threadpool
    try:
        key = object_key_from_url(body.image_url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ImageFinalizeResponse(object_path=finalize_image(key))


@public_router.get("/objects/{object_path:path}")
def serve_object(object_path: str) -> RedirectResponse:
    """Redirect to a short-lived download URL for a public object."""
    try:
        key = object_key_from_url(f"/objects/{object_path}")
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="Object not found") from exc

    if not is_public(key):
        raise ObjectAccessDeniedError(f"Object {key} is not public")
    return RedirectResponse(presign_get(key), status_code=307)
