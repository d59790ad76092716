from fastapi import APIRouter, File, Request, UploadFile, status

from agenticv.config import Settings
from agenticv.errors import AgenticvError
from agenticv.routers.deps import get_settings, resolve_storage_client
from agenticv.routers.errors import to_http_exception
from agenticv.schemas.uploads import UploadDeleteResponse, UploadRequest, UploadResult
from agenticv.services.upload_gateway import check_file_size, delete_upload, upload_file

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


def check_declared_size(file: UploadFile, settings: Settings) -> None:
    """Reject a multipart file whose size is known to exceed the limit before reading it."""
    if file.size is not None:
        check_file_size(file.filename or "upload", file.size, settings)


def build_upload_request(file: UploadFile, data: bytes) -> UploadRequest:
    return UploadRequest(
        file_name=file.filename or "upload",
        mime_type=file.content_type or "",
        size_bytes=len(data),
        raw_bytes=data,
    )


@router.post("", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
def create_upload(request: Request, file: UploadFile = File(...)) -> UploadResult:
    settings = get_settings(request)
    try:
        check_declared_size(file, settings)
        return upload_file(
            build_upload_request(file, file.file.read()),
            client=resolve_storage_client(request),
            settings=settings,
        )
    except AgenticvError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{key:path}", response_model=UploadDeleteResponse)
def remove_upload(key: str, request: Request) -> UploadDeleteResponse:
    try:
        delete_upload(key, client=resolve_storage_client(request), settings=get_settings(request))
    except AgenticvError as exc:
        raise to_http_exception(exc) from exc
    return UploadDeleteResponse(storage_path=key, deleted=True)
