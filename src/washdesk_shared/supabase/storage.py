"""
Supabase Storage helpers for image uploads and bucket management.
"""

from __future__ import annotations

import mimetypes
import time
import uuid
from typing import Any

from supabase import Client

from washdesk_shared.config import get_active_config
from washdesk_shared.constants import DEFAULT_BUCKET
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db, get_service_db
from washdesk_shared.validation import ValidationError

logger = get_logger(__name__)

RLS_VIOLATION = "new row violates row-level security policy"
RESOURCE_NOT_FOUND = "The resource was not found"


class StorageError(Exception):
    """Raised when an upload or delete fails after the fallback attempt."""

    def __init__(self, message: str, status: int | None = None):
        self.message = message
        self.status = status
        super().__init__(message)


def _error_details(exc: Exception) -> tuple[str, int | None]:
    """Pull (message, status) out of a storage client exception."""
    payload = exc.args[0] if exc.args else None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or str(exc)
        status = payload.get("statusCode") or payload.get("status")
    else:
        message = getattr(exc, "message", None) or str(exc)
        status = getattr(exc, "status", None)
    try:
        status = int(status) if status not in (None, "") else None
    except (TypeError, ValueError):
        status = None
    return str(message), status


def _default_bucket() -> str:
    return get_active_config().storage_default_bucket or DEFAULT_BUCKET


def should_fallback(message: str, status: int | None, bucket: str, default_bucket: str) -> bool:
    """
    Decide whether a failed storage call is retried against the default bucket.

    Never true when the failing bucket already is the default one.
    """
    if bucket == default_bucket:
        return False
    if RLS_VIOLATION in message:
        return True
    if "not found" in message.lower():
        return True
    return status == 400


def build_object_name(filename: str) -> str:
    """Generate a unique ``<epoch_ms>-<random>.<ext>`` object name."""
    _, dot, ext = filename.rpartition(".")
    if not dot or not ext or "/" in ext:
        raise ValidationError("Invalid file extension")
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:13]}.{ext.lower()}"


def object_name_from_url(url: str) -> str:
    name = url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    if not name:
        raise ValidationError("Invalid file URL")
    return name


def get_public_url(client: Client, bucket: str, path: str) -> str:
    url = client.storage.from_(bucket).get_public_url(path)
    return url.rstrip("?") if isinstance(url, str) else url


def _upload(client: Client, bucket: str, name: str, content: bytes, content_type: str) -> str:
    client.storage.from_(bucket).upload(
        path=name,
        file=content,
        file_options={"cache-control": "3600", "upsert": "false", "content-type": content_type},
    )
    return get_public_url(client, bucket, name)


def upload_image(
    content: bytes,
    filename: str,
    bucket: str | None = None,
    content_type: str | None = None,
    client: Client | None = None,
) -> str:
    """
    Upload an image and return its public URL.

    A failure caused by a missing bucket, a row-level security rejection or a
    400 from the storage API is retried once against the default bucket.
    """
    default_bucket = _default_bucket()
    bucket = bucket or default_bucket
    client = client or get_db()
    name = build_object_name(filename)
    content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

    try:
        url = _upload(client, bucket, name, content, content_type)
        logger.info(f"Uploaded {name} to bucket '{bucket}'")
        return url
    except Exception as exc:
        message, status = _error_details(exc)
        if not should_fallback(message, status, bucket, default_bucket):
            logger.error(f"Upload of {name} to '{bucket}' failed: {message}")
            raise StorageError(
                f"Upload failed: {message} (Status: {status or 'unknown'})", status
            ) from exc
        logger.warning(
            f"Upload to '{bucket}' failed ({message}); retrying with '{default_bucket}'"
        )

    try:
        return _upload(client, default_bucket, name, content, content_type)
    except Exception as exc:
        message, status = _error_details(exc)
        logger.error(f"Fallback upload of {name} to '{default_bucket}' failed: {message}")
        raise StorageError(
            f"Upload failed: {message} (Status: {status or 'unknown'})", status
        ) from exc


def delete_image(url: str, bucket: str | None = None, client: Client | None = None) -> bool:
    """Delete the object a public URL points at, with the same single fallback."""
    default_bucket = _default_bucket()
    bucket = bucket or default_bucket
    client = client or get_db()
    name = object_name_from_url(url)

    try:
        client.storage.from_(bucket).remove([name])
        logger.info(f"Deleted {name} from bucket '{bucket}'")
        return True
    except Exception as exc:
        message, status = _error_details(exc)
        if not should_fallback(message, status, bucket, default_bucket):
            raise StorageError(f"Delete failed: {message}", status) from exc
        logger.warning(f"Delete from '{bucket}' failed ({message}); retrying '{default_bucket}'")

    try:
        client.storage.from_(default_bucket).remove([name])
        return True
    except Exception as exc:
        message, status = _error_details(exc)
        raise StorageError(f"Delete failed: {message}", status) from exc


def initialize_storage_buckets(client: Client, buckets: list[str] | None = None) -> dict[str, Any]:
    """
    Create the public buckets the dashboards upload into.

    A bucket that already exists counts as a success.
    """
    buckets = buckets or get_active_config().storage_buckets
    results = []
    for bucket in buckets:
        try:
            client.storage.create_bucket(bucket, options={"public": True})
            results.append({"bucket": bucket, "success": True, "error": None})
            logger.info(f"Created storage bucket '{bucket}'")
        except Exception as exc:
            message, _ = _error_details(exc)
            if "already exists" in message.lower():
                results.append({"bucket": bucket, "success": True, "error": None})
                continue
            logger.error(f"Error creating bucket '{bucket}': {message}")
            results.append({"bucket": bucket, "success": False, "error": message})

    failed = [item["bucket"] for item in results if not item["success"]]
    if failed:
        message = f"Failed to initialize buckets: {', '.join(failed)}"
    else:
        message = "Storage buckets initialized"
    return {"success": not failed, "message": message, "results": results}


def initialize_storage(user_client: Client | None = None) -> dict[str, Any]:
    """
    Bootstrap buckets with the caller's client, then with the service role.

    The service-role retry only runs when the first pass left a bucket
    uncreated.
    """
    result = initialize_storage_buckets(user_client or get_db())
    if result["success"]:
        return result
    logger.warning("Bucket initialization incomplete; retrying with service role")
    return initialize_storage_buckets(get_service_db())


def _bucket_name(bucket: Any) -> str:
    if isinstance(bucket, dict):
        return bucket.get("name") or bucket.get("id")
    return getattr(bucket, "name", None) or getattr(bucket, "id", None)


def check_storage_setup(client: Client | None = None) -> dict[str, Any]:
    """Report which buckets exist and whether each one can be listed."""
    client = client or get_db()
    expected = get_active_config().storage_buckets

    try:
        existing = {_bucket_name(bucket) for bucket in client.storage.list_buckets()}
    except Exception as exc:
        message, _ = _error_details(exc)
        logger.error(f"Error listing buckets: {message}")
        return {"success": False, "message": f"Error listing buckets: {message}", "missing": []}

    missing = [bucket for bucket in expected if bucket not in existing]
    errors = []
    for bucket in expected:
        if bucket in missing:
            continue
        try:
            client.storage.from_(bucket).list("", {"limit": 1})
        except Exception as exc:
            message, _ = _error_details(exc)
            if RESOURCE_NOT_FOUND in message:
                continue
            errors.append({"bucket": bucket, "error": message})

    if missing:
        message = f"Missing buckets: {', '.join(missing)}"
    elif errors:
        message = "Some buckets are not accessible"
    else:
        message = "Storage is configured"
    return {
        "success": not missing and not errors,
        "message": message,
        "missing": missing,
        "errors": errors,
    }
