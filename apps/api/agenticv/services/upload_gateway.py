from __future__ import annotations

import logging
from datetime import UTC, datetime

from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from agenticv.config import Settings
from agenticv.errors import StorageError, UploadValidationError
from agenticv.schemas.uploads import UploadRequest, UploadResult
from agenticv.services.object_storage import (
    build_object_key,
    build_public_url,
    build_storage_path,
    delete_object,
    put_object_bytes,
)

logger = logging.getLogger(__name__)

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. ``1.5 KB`` or ``10 MB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


def file_extension(file_name: str) -> str:
    if "." not in file_name:
        return ""
    return "." + file_name.rsplit(".", 1)[-1].lower()


def check_file_size(file_name: str, size_bytes: int, settings: Settings) -> None:
    if size_bytes > settings.max_file_size:
        raise UploadValidationError(
            f"{file_name} is {format_file_size(size_bytes)}; "
            f"files must not exceed the {format_file_size(settings.max_file_size)} size limit"
        )


def validate_upload(request: UploadRequest, settings: Settings) -> None:
    """Check size, MIME type and extension against the configured allow-lists.

    Raises:
        UploadValidationError: with a reason suitable for showing to the user.
    """
    if request.size_bytes <= 0:
        raise UploadValidationError(f"{request.file_name} is empty")

    check_file_size(request.file_name, request.size_bytes, settings)

    mime_type = request.mime_type.split(";", 1)[0].strip().lower()
    if mime_type not in settings.allowed_mime_types:
        raise UploadValidationError(
            f"Unsupported file type {request.mime_type or 'unknown'!r}; "
            f"allowed types: {', '.join(settings.allowed_mime_types)}"
        )

    extension = file_extension(request.file_name)
    if extension not in settings.allowed_extensions:
        raise UploadValidationError(
            f"Unsupported file extension {extension or '(none)'!r}; "
            f"allowed extensions: {', '.join(settings.allowed_extensions)}"
        )


def upload_file(
    request: UploadRequest,
    *,
    client: BaseClient,
    settings: Settings,
    now: datetime | None = None,
) -> UploadResult:
    validate_upload(request, settings)

    uploaded_at = now or datetime.now(UTC)
    bucket = settings.storage_bucket
    key = build_object_key(request.file_name, prefix=settings.storage_key_prefix, now=uploaded_at)
    mime_type = request.mime_type.split(";", 1)[0].strip().lower()

    try:
        put_object_bytes(
            client=client,
            bucket=bucket,
            key=key,
            data=request.raw_bytes,
            content_type=mime_type,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("Upload of %s to bucket %s failed: %s", request.file_name, bucket, exc)
        raise StorageError(f"Upload failed: {exc}") from exc

    public_url = build_public_url(base_url=settings.storage_public_base_url, bucket=bucket, key=key)
    logger.info(
        "Uploaded %s (%s) to %s",
        request.file_name,
        format_file_size(request.size_bytes),
        build_storage_path(bucket, key),
    )
    return UploadResult(
        storage_path=key,
        public_url=public_url,
        bucket=bucket,
        file_name=request.file_name,
        mime_type=mime_type,
        size_bytes=request.size_bytes,
        uploaded_at=uploaded_at,
    )


def delete_upload(key: str, *, client: BaseClient, settings: Settings) -> None:
    try:
        delete_object(client=client, bucket=settings.storage_bucket, key=key)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Delete of %s from bucket %s failed: %s", key, settings.storage_bucket, exc)
        raise StorageError(f"Delete failed: {exc}") from exc
    logger.info("Deleted %s", build_storage_path(settings.storage_bucket, key))
