import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from agenticv.routers.deps import get_settings, get_webhook_transport
from agenticv.services.cors_relay import relay_to_webhook

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/relay", tags=["relay"])


async def _relay(kind: str, request: Request) -> Response:
    body = await request.body()
    try:
        upstream = await relay_to_webhook(
            kind,
            body,
            settings=get_settings(request),
            transport=get_webhook_transport(request),
        )
    except Exception as exc:
        logger.exception("Relay for %s failed", kind)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type"),
    )


@router.post("")
async def relay_legacy(request: Request) -> Response:
    return await _relay("cv-parser", request)


@router.post("/{kind}")
async def relay(kind: str, request: Request) -> Response:
    return await _relay(kind, request)
