"""Image upload flow against a mocked S3 client."""

import threading
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient

from portal.core.exceptions import InvalidUploadError, ObjectNotFoundError
from portal.services import storage

pytestmark = pytest.mark.objects

KEY = "uploads/7f0c1f52-4a57-4d43-a2d8-3f1c2b9e0d11"


def _not_found(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, operation)


@pytest.fixture
def s3(monkeypatch) -> MagicMock:
    client = MagicMock()
    client.generate_presigned_url.side_effect = (
        lambda op, Params, ExpiresIn: f"http://minio.test:9000/{Params['Bucket']}/{Params['Key']}"
        f"?X-Amz-Signature=sig&op={op}"
    )
    monkeypatch.setattr(storage, "_get_s3_client", lambda: client)
    return client


# --- Key resolution ---


def test_object_key_from_objects_path():
    assert storage.object_key_from_url(f"/objects/{KEY}") == KEY


def test_object_key_from_presigned_url():
    url = f"http://minio.test:9000/portal-test/{KEY}?X-Amz-Signature=abc"
    assert storage.object_key_from_url(url) == KEY


@pytest.mark.parametrize(
    "url",
    [
        "/objects/private/secret.png",
        "/objects/uploads/",
        "/objects/uploads/../private/x",
        "ftp://minio.test/portal-test/uploads/x",
        "uploads/x",
    ],
)
def test_object_key_outside_uploads_rejected(url):
    with pytest.raises(ValueError):
        storage.object_key_from_url(url)


def test_rewrite_presigned_url_uses_public_endpoint(monkeypatch):
    monkeypatch.setattr(storage.settings, "S3_PUBLIC_ENDPOINT", "https://files.example.com")
    rewritten = storage._rewrite_presigned_url("http://minio:9000/bucket/uploads/x?sig=1")
    assert rewritten == "https://files.example.com/bucket/uploads/x?sig=1"


# --- Finalize ---


def test_finalize_image_publishes(s3):
    s3.head_object.return_value = {"ContentType": "image/png", "ContentLength": 2048}

    assert storage.finalize_image(KEY) == f"/objects/{KEY}"

    s3.put_object_tagging.assert_called_once()
    tagging = s3.put_object_tagging.call_args.kwargs["Tagging"]
    assert tagging == {"TagSet": [{"Key": "visibility", "Value": "public"}]}
    s3.delete_object.assert_not_called()


def test_finalize_rejects_non_image_and_deletes(s3):
    s3.head_object.return_value = {"ContentType": "application/pdf", "ContentLength": 10}

    with pytest.raises(InvalidUploadError):
        storage.finalize_image(KEY)

    s3.delete_object.assert_called_once_with(Bucket="portal-test", Key=KEY)
    s3.put_object_tagging.assert_not_called()


def test_finalize_rejects_oversized_and_deletes(s3):
    s3.head_object.return_value = {"ContentType": "image/jpeg", "ContentLength": 101}

    with pytest.raises(InvalidUploadError):
        storage.finalize_image(KEY, max_size=100)

    s3.delete_object.assert_called_once()


def test_finalize_missing_object(s3):
    s3.head_object.side_effect = _not_found("HeadObject")

    with pytest.raises(ObjectNotFoundError):
        storage.finalize_image(KEY)


def test_head_object_reraises_other_errors(s3):
    s3.head_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "HeadObject"
    )
    with pytest.raises(ClientError):
        storage.head_object(KEY)


# --- Endpoints ---


async def test_upload_target(client: AsyncClient, s3):
    resp = await client.post("/api/objects/upload")

    assert resp.status_code == 200
    body = resp.json()
    assert body["object_path"].startswith("/objects/uploads/")
    assert body["expires_in"] == storage.PRESIGN_UPLOAD_EXPIRES
    assert "op=put_object" in body["upload_url"]
    key = body["object_path"][len("/objects/") :]
    assert key in body["upload_url"]


async def test_finalize_endpoint(client: AsyncClient, s3):
    s3.head_object.return_value = {"ContentType": "image/webp", "ContentLength": 512}

    resp = await client.put(
        "/api/images",
        json={"image_url": f"http://minio.test:9000/portal-test/{KEY}?X-Amz-Signature=x"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"object_path": f"/objects/{KEY}"}


async def test_finalize_endpoint_rejects_bad_upload(client: AsyncClient, s3):
    s3.head_object.return_value = {"ContentType": "text/html", "ContentLength": 512}

    resp = await client.put("/api/images", json={"image_url": f"/objects/{KEY}"})

    assert resp.status_code == 400
    assert resp.json()["title"] == "Invalid Upload"
    s3.delete_object.assert_called_once()


async def test_finalize_endpoint_rejects_foreign_url(client: AsyncClient, s3):
    resp = await client.put("/api/images", json={"image_url": "/objects/private/x.png"})
    assert resp.status_code == 400
    s3.head_object.assert_not_called()


async def test_s3_calls_run_off_the_event_loop(client: AsyncClient, s3):
    """Blocking boto3 round-trips execute in a worker thread, not on the loop thread."""
    loop_thread = threading.get_ident()
    seen: list[int] = []

    def head(**kwargs):
        seen.append(threading.get_ident())
        return {"ContentType": "image/png", "ContentLength": 1}

    def tagging(**kwargs):
        seen.append(threading.get_ident())
        return {"TagSet": [{"Key": "visibility", "Value": "public"}]}

    s3.head_object.side_effect = head
    s3.get_object_tagging.side_effect = tagging

    resp = await client.put("/api/images", json={"image_url": f"/objects/{KEY}"})
    assert resp.status_code == 200
    assert (await client.get(f"/objects/{KEY}")).status_code == 307

    assert len(seen) == 2
    assert loop_thread not in seen


async def test_serve_public_object_redirects(client: AsyncClient, s3):
    s3.get_object_tagging.return_value = {"TagSet": [{"Key": "visibility", "Value": "public"}]}

    resp = await client.get(f"/objects/{KEY}")

    assert resp.status_code == 307
    assert "op=get_object" in resp.headers["location"]


async def test_serve_private_object_forbidden(client: AsyncClient, s3):
    s3.get_object_tagging.return_value = {"TagSet": []}

    resp = await client.get(f"/objects/{KEY}")

    assert resp.status_code == 403


async def test_serve_missing_object_not_found(client: AsyncClient, s3):
    s3.get_object_tagging.side_effect = _not_found("GetObjectTagging")

    assert (await client.get(f"/objects/{KEY}")).status_code == 404
    assert (await client.get("/objects/elsewhere/x.png")).status_code == 404
