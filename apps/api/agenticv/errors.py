class AgenticvError(Exception):
    """Base exception for upload and forwarding failures."""


class UploadValidationError(AgenticvError):
    """Raised when a file fails the type, extension or size guard. No network call is made."""


class StorageError(AgenticvError):
    """Raised when the object-storage provider rejects or fails an operation."""


class ForwardError(AgenticvError):
    """Base exception for webhook forwarding failures."""


class UnknownEndpointError(ForwardError):
    """Raised when an endpoint kind is not one of the configured webhook kinds."""


class WebhookNotConfiguredError(ForwardError):
    """Raised when no usable webhook URL is configured for an endpoint kind."""


class WebhookTimeoutError(ForwardError):
    """Raised when a webhook call exceeds its deadline and is cancelled."""


class RemoteError(ForwardError):
    """Raised when a webhook answers with a failure status or unexpected content."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RelayError(AgenticvError):
    """Raised when the CORS relay cannot complete its own forward."""
