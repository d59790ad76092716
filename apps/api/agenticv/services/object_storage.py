from __future__ import annotations

import re
from datetime import UTC, datetime
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.client import BaseClient

from agenticv.config import Settings
from agenticv.errors import StorageError


def create_storage_client(settings: Settings) -> BaseClient:
    access_key = settings.storage_access_key_id
    secret_key = settings.storage_secret_access_key
    region = settings.storage_region
    endpoint_url = settings.storage_endpoint_url or f"https://s3.{region}.amazonaws.com"
    if not access_key or not secret_key:
        raise StorageError(
            "Storage credentials missing: set STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY"
        )

    return boto3.client(
        "s3",
        region_name=region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        endpoint_url=endpoint_url,
    )


def sanitize_filename(filename: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "_", filename).strip("_")
    return cleaned or "file"


def build_object_key(filename: str, *, prefix: str | None = None, now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    # ISO-8601 with ':' and '.' replaced so the key stays URL-safe
    timestamp = moment.strftime("%Y-%m-%dT%H-%M-%S-") + f"{moment.microsecond // 1000:03d}Z"
    key = f"{timestamp}_{uuid4().hex[:8]}_{sanitize_filename(filename)}"
    if prefix:
        return f"{prefix.strip('/')}/{key}"
    return key


def build_storage_path(bucket: str, key: str) -> str:
    return f"{bucket}/{key}"


def build_public_url(*, base_url: str, bucket: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{bucket}/{quote(key)}"


def put_object_bytes(
    *,
    client: BaseClient,
    bucket: str,
    key: str,
    data: bytes,
    content_type: str,
    cache_control: str = "max-age=3600",
) -> None:
    client.put_object(
        Bucket=bucket,
        Key=key,
        Body=data,
        ContentType=content_type,
        CacheControl=cache_control,
    )


def delete_object(*, client: BaseClient, bucket: str, key: str) -> None:
    client.delete_object(Bucket=bucket, Key=key)


def list_bucket_names(client: BaseClient) -> list[str]:
    response = client.list_buckets()
    return [bucket["Name"] for bucket in response.get("Buckets", []) if bucket.get("Name")]
