"""Object upload / image finalize schemas."""

from pydantic import BaseModel, Field


class UploadTargetResponse(BaseModel):
    upload_url: str
    object_path: str
    expires_in: int


class ImageFinalizeRequest(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=4096)


class ImageFinalizeResponse(BaseModel):
    object_path: str
