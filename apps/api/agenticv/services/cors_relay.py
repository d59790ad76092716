from __future__ import annotations

import logging

import httpx

from agenticv.config import Settings
from agenticv.errors import ForwardError, RelayError
from agenticv.services.webhook_client import build_headers, post_with_deadline, resolve_webhook_url

logger = logging.getLogger(__name__)


async def relay_to_webhook(
    kind: str,
    body: bytes,
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Re-POST a browser body to the real webhook and return the upstream response untouched.

    The proxy toggle is ignored here so the relay never calls itself.
    """
    try:
        url = resolve_webhook_url(kind, settings)
        logger.info("Relaying %d bytes to %s", len(body), url)
        response = await post_with_deadline(
            url,
            content=body,
            headers=build_headers(settings),
            timeout=settings.webhook_timeout_seconds,
            transport=transport,
        )
    except ForwardError as exc:
        logger.error("Relay for %s failed: %s", kind, exc)
        raise RelayError(str(exc)) from exc

    logger.info("Relay for %s answered with status %s", kind, response.status_code)
    return response
