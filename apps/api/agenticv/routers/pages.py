from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from starlette.templating import Jinja2Templates

from agenticv.routers.deps import get_settings
from agenticv.services.upload_gateway import format_file_size
from agenticv.services.webhook_client import ENDPOINT_KINDS

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))


@router.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    settings = get_settings(request)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "endpoint_kinds": ENDPOINT_KINDS,
            "accept": ",".join(settings.allowed_extensions + settings.allowed_mime_types),
            "max_file_size": settings.max_file_size,
            "max_file_size_label": format_file_size(settings.max_file_size),
        },
    )
