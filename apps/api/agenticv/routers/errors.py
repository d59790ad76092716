from fastapi import HTTPException, status

from agenticv.errors import (
    AgenticvError,
    RemoteError,
    UnknownEndpointError,
    UploadValidationError,
    WebhookNotConfiguredError,
    WebhookTimeoutError,
)


def to_http_exception(exc: AgenticvError) -> HTTPException:
    if isinstance(exc, UploadValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, UnknownEndpointError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, WebhookNotConfiguredError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, WebhookTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc))
    if isinstance(exc, RemoteError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "message": str(exc),
                "upstream_status": exc.status_code,
                "body": exc.body,
            },
        )
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
