import uuid
from datetime import timedelta
from typing import Optional, Tuple
from google.api_core import exceptions as gcs_errors
from google.auth import exceptions as auth_errors
from google.cloud import storage
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from app.core.config import settings
from app.core.exceptions import NotFound, UpstreamUnavailable
from app.core.logger import logger

# Paths handed to clients look like /objects/uploads/<uuid> and map onto
# <PRIVATE_OBJECT_DIR>/uploads/<uuid> inside the bucket
OBJECT_PATH_PREFIX = "/objects/"
UPLOAD_URL_TTL = timedelta(minutes=15)
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StoredObject(BaseModel):
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


_client: Optional[storage.Client] = None


def _bucket() -> storage.Bucket:
    global _client
    if not settings.OBJECT_STORAGE_BUCKET:
        raise UpstreamUnavailable("Object storage not configured", status_code=503)
    if _client is None:
        _client = storage.Client()
    return _client.bucket(settings.OBJECT_STORAGE_BUCKET)


def is_object_path(path: str) -> bool:
    return path.startswith(OBJECT_PATH_PREFIX) and len(path) > len(OBJECT_PATH_PREFIX)


def _blob_name(object_path: str) -> str:
    if not is_object_path(object_path):
        raise NotFound("File not found")
    entity_id = object_path[len(OBJECT_PATH_PREFIX):]
    return f"{settings.PRIVATE_OBJECT_DIR.strip('/')}/{entity_id}"


async def create_upload_url(content_type: str) -> Tuple[str, str]:
    """Signed PUT URL for a fresh private object, and the path to store for it."""
    object_path = f"{OBJECT_PATH_PREFIX}uploads/{uuid.uuid4()}"
    blob = _bucket().blob(_blob_name(object_path))
    try:
        upload_url = await run_in_threadpool(
            blob.generate_signed_url,
            version="v4",
            expiration=UPLOAD_URL_TTL,
            method="PUT",
            content_type=content_type,
        )
    except (gcs_errors.GoogleAPICallError, auth_errors.GoogleAuthError) as e:
        logger.error(f"Object storage signing error: {e}")
        raise UpstreamUnavailable("Failed to generate upload URL")

    return upload_url, object_path


async def fetch_object(object_path: str) -> StoredObject:
    blob = _bucket().blob(_blob_name(object_path))
    try:
        content = await run_in_threadpool(blob.download_as_bytes)
    except gcs_errors.NotFound:
        raise NotFound("File not found")
    except gcs_errors.GoogleAPICallError as e:
        logger.error(f"Object storage download error for {object_path}: {e}")
        raise UpstreamUnavailable("Failed to serve document")

    return StoredObject(content=content, content_type=blob.content_type or DEFAULT_CONTENT_TYPE)


async def set_object_owner(object_path: str, owner_id: str) -> None:
    """Tag the object as private to owner_id."""
    blob = _bucket().blob(_blob_name(object_path))
    blob.metadata = {"owner": owner_id, "visibility": "private"}
    try:
        await run_in_threadpool(blob.patch)
    except gcs_errors.NotFound:
        raise NotFound("File not found")
    except gcs_errors.GoogleAPICallError as e:
        logger.error(f"Object storage metadata error for {object_path}: {e}")
        raise UpstreamUnavailable("Failed to update object")
