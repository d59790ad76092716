import httpx
from botocore.client import BaseClient
from fastapi import Request

from agenticv.config import Settings
from agenticv.services.object_storage import create_storage_client


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_webhook_transport(request: Request) -> httpx.AsyncBaseTransport | None:
    return request.app.state.webhook_transport


def resolve_storage_client(request: Request) -> BaseClient:
    """Return the injected storage client, or build one from settings.

    Raises:
        StorageError: if credentials are missing.
    """
    client = request.app.state.storage_client
    if client is not None:
        return client
    return create_storage_client(request.app.state.settings)
