from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

import httpx

from agenticv.config import Settings
from agenticv.errors import (
    ForwardError,
    RemoteError,
    UnknownEndpointError,
    WebhookNotConfiguredError,
    WebhookTimeoutError,
)
from agenticv.schemas.webhooks import AnalysisPayload

logger = logging.getLogger(__name__)

ENDPOINT_KINDS = ("cv-parser", "jd-parser", "gap-analyzer", "complete-analysis")
_ENDPOINT_ALIASES = {"analyze-complete": "complete-analysis"}
_BODY_SNIPPET_CHARS = 500
_ANALYSIS_KEYS = ("cv_highlighting", "jd_highlighting", "match_score")
_URL_PATTERN = re.compile(r"https?://[^\s\"']+")


def resolve_endpoint_kind(kind: str) -> str:
    normalized = kind.strip().lower()
    normalized = _ENDPOINT_ALIASES.get(normalized, normalized)
    if normalized not in ENDPOINT_KINDS:
        raise UnknownEndpointError(
            f"Unknown endpoint kind {kind!r}; expected one of {', '.join(ENDPOINT_KINDS)}"
        )
    return normalized


def clean_webhook_url(raw_url: str) -> str:
    """Strip copy-paste debris (quotes, ``--body`` prefixes, newlines) from a configured URL."""
    candidate = raw_url.strip()
    if _URL_PATTERN.fullmatch(candidate):
        return candidate
    match = _URL_PATTERN.search(candidate)
    if match is None:
        raise WebhookNotConfiguredError(f"Configured webhook URL is not a URL: {raw_url!r}")
    logger.warning("Malformed webhook URL %r, using %s", raw_url, match.group(0))
    return match.group(0)


def resolve_webhook_url(kind: str, settings: Settings) -> str:
    """Return the real webhook URL for a kind: kind-specific URL, then the shared default."""
    endpoint_kind = resolve_endpoint_kind(kind)
    raw_url = settings.webhook_urls.get(endpoint_kind) or settings.webhook_default_url
    if not raw_url:
        raise WebhookNotConfiguredError(f"No webhook URL configured for {endpoint_kind}")
    return clean_webhook_url(raw_url)


def resolve_endpoint_url(kind: str, settings: Settings) -> str:
    """Return the URL a forward should hit, honouring the proxy toggle."""
    endpoint_kind = resolve_endpoint_kind(kind)
    if settings.use_proxy:
        return f"{settings.proxy_server_url.rstrip('/')}/api/relay/{endpoint_kind}"
    return resolve_webhook_url(endpoint_kind, settings)


def build_headers(settings: Settings) -> dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if settings.webhook_api_key:
        headers["Authorization"] = f"Bearer {settings.webhook_api_key}"
    return headers


async def post_with_deadline(
    url: str,
    *,
    content: bytes,
    headers: dict[str, str],
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """POST once; the whole exchange is cancelled when ``timeout`` elapses.

    Raises:
        WebhookTimeoutError: if the deadline passes before a response is read.
        ForwardError: on connection-level failures.
    """

    async def _send() -> httpx.Response:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            return await client.post(url, content=content, headers=headers)

    try:
        return await asyncio.wait_for(_send(), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise WebhookTimeoutError(f"Webhook {url} did not answer within {timeout:g}s") from exc
    except httpx.RequestError as exc:
        raise ForwardError(f"Request to {url} failed: {exc}") from exc


def _body_snippet(response: httpx.Response) -> str:
    return response.text[:_BODY_SNIPPET_CHARS]


def parse_webhook_response(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "").lower()
    if "text/html" in content_type:
        raise RemoteError(
            f"Webhook returned an HTML page (status {response.status_code}); the workflow is probably misconfigured",
            status_code=response.status_code,
            body=_body_snippet(response),
        )

    if not response.is_success:
        raise RemoteError(
            f"Webhook returned status {response.status_code}",
            status_code=response.status_code,
            body=_body_snippet(response),
        )

    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RemoteError(
            "Webhook returned a non-JSON body",
            status_code=response.status_code,
            body=_body_snippet(response),
        ) from exc

    if isinstance(data, dict) and data.get("code") in (404, 500) and isinstance(data.get("message"), str):
        message = data["message"]
        if "webhook" in message and "not registered" in message:
            message = f"Workflow is not active: {message}"
        raise RemoteError(message, status_code=data["code"], body=_body_snippet(response))

    return data


async def forward(
    kind: str,
    payload: AnalysisPayload,
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Send ``payload`` to the webhook configured for ``kind`` and return its JSON."""
    endpoint_kind = resolve_endpoint_kind(kind)
    url = resolve_endpoint_url(endpoint_kind, settings)
    body = json.dumps(payload.to_wire()).encode("utf-8")

    logger.info("Forwarding %s to %s (%s)", payload.file_name, endpoint_kind, url)
    response = await post_with_deadline(
        url,
        content=body,
        headers=build_headers(settings),
        timeout=settings.webhook_timeout_seconds,
        transport=transport,
    )

    try:
        result = parse_webhook_response(response)
    except RemoteError as exc:
        logger.error("Webhook %s failed: %s", endpoint_kind, exc)
        raise
    logger.info("Webhook %s answered with status %s", endpoint_kind, response.status_code)
    return result


def extract_analysis_result(data: Any) -> Any:
    """Unwrap and check the shapes workflow engines return for a complete analysis.

    A one-element list is unwrapped. An ``output`` field (decoded when it is a
    JSON string) is the result; otherwise the body must carry an ``analysis``
    object and is returned as-is. Either way the analysis must hold
    ``cv_highlighting``, ``jd_highlighting`` and ``match_score``, and they must
    not all be empty.
    """
    if isinstance(data, list) and data:
        data = data[0]
    if not isinstance(data, dict):
        raise RemoteError("Invalid analysis response: expected a JSON object", body=str(data)[:_BODY_SNIPPET_CHARS])

    if "output" in data:
        result = data["output"]
        if isinstance(result, str):
            try:
                result = json.loads(result)
            except json.JSONDecodeError as exc:
                raise RemoteError("Analysis output is not valid JSON", body=result[:_BODY_SNIPPET_CHARS]) from exc
        analysis = result
    else:
        result = data
        analysis = data.get("analysis")

    _check_analysis(analysis)
    return result


def _check_analysis(analysis: Any) -> None:
    if not isinstance(analysis, dict) or any(analysis.get(key) is None for key in _ANALYSIS_KEYS):
        raise RemoteError(
            "Invalid analysis response: missing cv_highlighting, jd_highlighting or match_score",
            body=json.dumps(analysis, default=str)[:_BODY_SNIPPET_CHARS],
        )

    match_score = analysis["match_score"]
    score = match_score.get("score") if isinstance(match_score, dict) else match_score
    if not analysis["cv_highlighting"] and not analysis["jd_highlighting"] and score in (None, ""):
        raise RemoteError("Analysis webhook returned empty results; check the workflow configuration")
