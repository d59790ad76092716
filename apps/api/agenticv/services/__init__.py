from agenticv.services.cors_relay import relay_to_webhook
from agenticv.services.object_storage import (
    build_object_key,
    build_public_url,
    create_storage_client,
    delete_object,
    list_bucket_names,
    put_object_bytes,
    sanitize_filename,
)
from agenticv.services.upload_gateway import (
    delete_upload,
    format_file_size,
    upload_file,
    validate_upload,
)
from agenticv.services.webhook_client import (
    ENDPOINT_KINDS,
    extract_analysis_result,
    forward,
    parse_webhook_response,
    resolve_endpoint_kind,
    resolve_endpoint_url,
    resolve_webhook_url,
)

__all__ = [
    "relay_to_webhook",
    "build_object_key",
    "build_public_url",
    "create_storage_client",
    "delete_object",
    "list_bucket_names",
    "put_object_bytes",
    "sanitize_filename",
    "delete_upload",
    "format_file_size",
    "upload_file",
    "validate_upload",
    "ENDPOINT_KINDS",
    "extract_analysis_result",
    "forward",
    "parse_webhook_response",
    "resolve_endpoint_kind",
    "resolve_endpoint_url",
    "resolve_webhook_url",
]
