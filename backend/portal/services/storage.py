"""S3 / MinIO object storage for uploaded images.

Uploads land under ``uploads/{uuid}``. The API exposes them to the client as
``/objects/uploads/{uuid}`` paths; an object is served only after it has been
finalized and tagged ``visibility=public``.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from urllib.parse import unquote, urlparse, urlunparse

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from portal.core.config import settings
from portal.core.exceptions import InvalidUploadError, ObjectNotFoundError

logger = logging.getLogger(__name__)

PRESIGN_UPLOAD_EXPIRES = 900  # 15 min
PRESIGN_DOWNLOAD_EXPIRES = 900  # 15 min

UPLOAD_PREFIX = "uploads/"
OBJECTS_PATH_PREFIX = "/objects/"
VISIBILITY_TAG = "visibility"

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    content_type: str
    size: int


_minio_cred_warned = False


def _get_s3_client():  # type: ignore[no-untyped-def]
    global _minio_cred_warned  # noqa: PLW0603
    config_kwargs: dict = {"signature_version": "s3v4"}
    if settings.S3_ENDPOINT_URL:
        config_kwargs["s3"] = {"addressing_style": "path"}
    kwargs: dict = {
        "service_name": "s3",
        "region_name": settings.AWS_REGION,
        "config": Config(**config_kwargs),
    }
    if settings.S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY

    # Warn if MinIO endpoint is set but boto3 will pick up real AWS creds
    if settings.S3_ENDPOINT_URL and not _minio_cred_warned:
        env_key = os.environ.get("AWS_ACCESS_KEY_ID", "")
        if env_key.startswith("AKIA") and (
            not settings.AWS_ACCESS_KEY_ID or settings.AWS_ACCESS_KEY_ID.startswith("AKIA")
        ):
            logger.warning(
                "S3_ENDPOINT_URL points to MinIO but AWS_ACCESS_KEY_ID "
                "looks like a real AWS key (AKIA...). Presigned URLs will "
                "be signed with AWS creds and fail against MinIO."
            )
        _minio_cred_warned = True

    return boto3.client(**kwargs)


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


def _rewrite_presigned_url(url: str) -> str:
    """Swap scheme+netloc to S3_PUBLIC_ENDPOINT so browsers can reach MinIO."""
    if not settings.S3_PUBLIC_ENDPOINT:
        return url
    public = urlparse(settings.S3_PUBLIC_ENDPOINT)
    parsed = urlparse(url)
    return urlunparse(parsed._replace(scheme=public.scheme, netloc=public.netloc))


def build_upload_key() -> str:
    return f"{UPLOAD_PREFIX}{uuid.uuid4()}"


def object_path(key: str) -> str:
    """Client-facing path for an object key: ``/objects/{key}``."""
    return f"{OBJECTS_PATH_PREFIX}{key}"


def object_key_from_url(url: str) -> str:
    """Resolve an ``/objects/...`` path or a (presigned) bucket URL to an upload key.

    Raises ValueError when the target is not inside the uploads area.
    """
    if url.startswith(OBJECTS_PATH_PREFIX):
        key = url[len(OBJECTS_PATH_PREFIX) :]
    else:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError("Expected an /objects/ path or an http(s) URL")
        key = unquote(parsed.path).lstrip("/")
        # Path-style addressing puts the bucket first
        bucket_prefix = f"{settings.S3_BUCKET}/"
        if settings.S3_BUCKET and key.startswith(bucket_prefix):
            key = key[len(bucket_prefix) :]

    key = key.split("?", 1)[0]
    if not key.startswith(UPLOAD_PREFIX) or ".." in key or key == UPLOAD_PREFIX:
        raise ValueError("Object is outside the uploads area")
    return key


def presign_put(key: str, expires: int = PRESIGN_UPLOAD_EXPIRES) -> str:
    """Generate a presigned PUT URL for uploading to S3."""
    client = _get_s3_client()
    url = client.generate_presigned_url(
        "put_object",
        Params={"Bucket": settings.S3_BUCKET, "Key": key},
        ExpiresIn=expires,
    )
    return _rewrite_presigned_url(url)


def presign_get(key: str, expires: int = PRESIGN_DOWNLOAD_EXPIRES) -> str:
    """Generate a presigned GET URL for downloading from S3."""
    client = _get_s3_client()
    url = client.generate_presigned_url(
        "get_object",
        Params={"Bucket": settings.S3_BUCKET, "Key": key},
        ExpiresIn=expires,
    )
    return _rewrite_presigned_url(url)


def head_object(key: str) -> ObjectInfo | None:
    client = _get_s3_client()
    try:
        head = client.head_object(Bucket=settings.S3_BUCKET, Key=key)
    except ClientError as exc:
        if _is_not_found(exc):
            return None
        raise
    return ObjectInfo(
        key=key,
        content_type=head.get("ContentType", ""),
        size=head.get("ContentLength", 0),
    )


def delete_object(key: str) -> None:
    client = _get_s3_client()
    client.delete_object(Bucket=settings.S3_BUCKET, Key=key)


def set_public(key: str) -> None:
    client = _get_s3_client()
    client.put_object_tagging(
        Bucket=settings.S3_BUCKET,
        Key=key,
        Tagging={"TagSet": [{"Key": VISIBILITY_TAG, "Value": "public"}]},
    )


def is_public(key: str) -> bool:
    """True when the object exists and carries ``visibility=public``.

    Raises ObjectNotFoundError when the object is missing.
    """
    client = _get_s3_client()
    try:
        tagging = client.get_object_tagging(Bucket=settings.S3_BUCKET, Key=key)
    except ClientError as exc:
        if _is_not_found(exc):
            raise ObjectNotFoundError(f"Object {key} not found") from exc
        raise
    tags = {t["Key"]: t["Value"] for t in tagging.get("TagSet", [])}
    return tags.get(VISIBILITY_TAG) == "public"


def finalize_image(key: str, max_size: int | None = None) -> str:
    """Validate an uploaded image and publish it; returns its ``/objects/`` path.

    Objects that are not ``image/*`` or exceed ``max_size`` are deleted before
    InvalidUploadError is raised, so no unvalidated file is left behind.
    """
    max_size = max_size if max_size is not None else settings.MAX_IMAGE_SIZE
    info = head_object(key)
    if info is None:
        raise ObjectNotFoundError(f"Object {key} not found")

    problem = None
    if not info.content_type.startswith("image/"):
        problem = f"content type {info.content_type or 'unknown'} is not an image"
    elif info.size > max_size:
        problem = f"size {info.size} bytes exceeds the {max_size} byte limit"

    if problem is not None:
        logger.warning("Rejecting upload %s: %s", key, problem)
        delete_object(key)
        raise InvalidUploadError(f"Upload rejected: {problem}")

    set_public(key)
    logger.info("Finalized image %s (%d bytes)", key, info.size)
    return object_path(key)
