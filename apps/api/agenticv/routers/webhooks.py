import logging

from fastapi import APIRouter, File, Form, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from agenticv.errors import AgenticvError
from agenticv.routers.deps import get_settings, get_webhook_transport, resolve_storage_client
from agenticv.routers.errors import to_http_exception
from agenticv.routers.uploads import build_upload_request, check_declared_size
from agenticv.schemas.webhooks import AnalysisPayload, AnalyzeResponse, ForwardResponse
from agenticv.services.upload_gateway import upload_file
from agenticv.services.webhook_client import (
    extract_analysis_result,
    forward,
    resolve_endpoint_kind,
    resolve_endpoint_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhooks"])


@router.post("/forward/{kind}", response_model=ForwardResponse)
async def forward_payload(kind: str, payload: AnalysisPayload, request: Request) -> ForwardResponse:
    settings = get_settings(request)
    try:
        endpoint_kind = resolve_endpoint_kind(kind)
        endpoint_url = resolve_endpoint_url(endpoint_kind, settings)
        result = await forward(
            endpoint_kind,
            payload,
            settings=settings,
            transport=get_webhook_transport(request),
        )
    except AgenticvError as exc:
        raise to_http_exception(exc) from exc

    return ForwardResponse(kind=endpoint_kind, endpoint_url=endpoint_url, result=result)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_file(
    request: Request,
    file: UploadFile = File(...),
    kind: str = Form(default="cv-parser"),
    question: str | None = Form(default=None),
    session_id: str | None = Form(default=None),
    job_description: str | None = Form(default=None),
) -> AnalyzeResponse:
    settings = get_settings(request)
    try:
        endpoint_kind = resolve_endpoint_kind(kind)
        check_declared_size(file, settings)
        upload_request = build_upload_request(file, await file.read())
        upload = await run_in_threadpool(
            upload_file,
            upload_request,
            client=resolve_storage_client(request),
            settings=settings,
        )
        payload = AnalysisPayload.from_upload(
            upload,
            question=question,
            session_id=session_id,
            extra={"jobDescription": job_description},
        )
        result = await forward(
            endpoint_kind,
            payload,
            settings=settings,
            transport=get_webhook_transport(request),
        )
        if endpoint_kind == "complete-analysis":
            result = extract_analysis_result(result)
    except AgenticvError as exc:
        logger.error("Analysis of %s failed: %s", file.filename, exc)
        raise to_http_exception(exc) from exc

    return AnalyzeResponse(kind=endpoint_kind, upload=upload, result=result)
