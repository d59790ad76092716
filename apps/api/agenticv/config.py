import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict


_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(_ENV_PATH, override=False)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_ALLOWED_MIME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
DEFAULT_ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx")
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:3000",
    "http://localhost:3001",
)
DEFAULT_WEBHOOK_TIMEOUT_SECONDS = 55.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _get_env_list(name: str) -> tuple[str, ...] | None:
    value = _get_env(name)
    if value is None:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


def get_log_level() -> str:
    return (_get_env("LOG_LEVEL") or "INFO").upper()


def get_storage_bucket() -> str:
    """Return the target bucket.

    Deployments have used `cv-uploads`, `cv_uploads` and `cv-documents`;
    the value is configuration, `cv-uploads` is only the fallback.
    """
    return _get_env("STORAGE_BUCKET") or "cv-uploads"


def get_storage_region() -> str:
    return _get_env("STORAGE_REGION") or "us-east-1"


def get_storage_endpoint_url() -> str | None:
    return _get_env("STORAGE_ENDPOINT_URL")


def get_storage_access_key_id() -> str | None:
    return _get_env("STORAGE_ACCESS_KEY_ID")


def get_storage_secret_access_key() -> str | None:
    return _get_env("STORAGE_SECRET_ACCESS_KEY")


def get_storage_public_base_url() -> str:
    endpoint_url = get_storage_endpoint_url() or f"https://s3.{get_storage_region()}.amazonaws.com"
    return _get_env("STORAGE_PUBLIC_BASE_URL") or endpoint_url


def get_storage_key_prefix() -> str | None:
    prefix = _get_env("STORAGE_KEY_PREFIX")
    if prefix is None:
        return None
    return prefix.strip("/") or None


def get_upload_max_file_size() -> int:
    raw = _get_env("UPLOAD_MAX_FILE_SIZE")
    if raw is None:
        return DEFAULT_MAX_FILE_SIZE
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"UPLOAD_MAX_FILE_SIZE must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError("UPLOAD_MAX_FILE_SIZE must be positive")
    return value


def get_upload_allowed_mime_types() -> tuple[str, ...]:
    values = _get_env_list("UPLOAD_ALLOWED_MIME_TYPES") or DEFAULT_ALLOWED_MIME_TYPES
    return tuple(value.lower() for value in values)


def get_upload_allowed_extensions() -> tuple[str, ...]:
    values = _get_env_list("UPLOAD_ALLOWED_EXTENSIONS") or DEFAULT_ALLOWED_EXTENSIONS
    return tuple(value.lower() if value.startswith(".") else f".{value.lower()}" for value in values)


def get_webhook_default_url() -> str | None:
    return _get_env("WEBHOOK_URL")


def get_webhook_cv_parser_url() -> str | None:
    return _get_env("WEBHOOK_CV_PARSER_URL")


def get_webhook_jd_parser_url() -> str | None:
    return _get_env("WEBHOOK_JD_PARSER_URL")


def get_webhook_gap_analyzer_url() -> str | None:
    return _get_env("WEBHOOK_GAP_ANALYZER_URL")


def get_webhook_complete_analysis_url() -> str | None:
    return _get_env("WEBHOOK_COMPLETE_ANALYSIS_URL")


def get_webhook_timeout_seconds() -> float:
    raw = _get_env("WEBHOOK_TIMEOUT_SECONDS")
    if raw is None:
        return DEFAULT_WEBHOOK_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"WEBHOOK_TIMEOUT_SECONDS must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError("WEBHOOK_TIMEOUT_SECONDS must be positive")
    return value


def get_webhook_api_key() -> str | None:
    return _get_env("WEBHOOK_API_KEY")


def get_use_proxy() -> bool:
    return (_get_env("USE_PROXY") or "").lower() in _TRUE_VALUES


def get_proxy_server_url() -> str:
    return (_get_env("PROXY_SERVER_URL") or "http://localhost:3002").rstrip("/")


def get_cors_allow_origins() -> tuple[str, ...]:
    return _get_env_list("CORS_ALLOW_ORIGINS") or DEFAULT_CORS_ORIGINS


class Settings(BaseModel):
    """Immutable runtime configuration handed to every component."""

    model_config = ConfigDict(frozen=True)

    log_level: str = "INFO"

    storage_bucket: str = "cv-uploads"
    storage_region: str = "us-east-1"
    storage_endpoint_url: str | None = None
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_public_base_url: str = "https://s3.us-east-1.amazonaws.com"
    storage_key_prefix: str | None = None

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    allowed_mime_types: tuple[str, ...] = DEFAULT_ALLOWED_MIME_TYPES
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS

    webhook_default_url: str | None = None
    webhook_urls: dict[str, str | None] = {}
    webhook_timeout_seconds: float = DEFAULT_WEBHOOK_TIMEOUT_SECONDS
    webhook_api_key: str | None = None

    use_proxy: bool = False
    proxy_server_url: str = "http://localhost:3002"

    cors_allow_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS


def load_settings() -> Settings:
    """Build a Settings value from the process environment (and `.env`)."""
    return Settings(
        log_level=get_log_level(),
        storage_bucket=get_storage_bucket(),
        storage_region=get_storage_region(),
        storage_endpoint_url=get_storage_endpoint_url(),
        storage_access_key_id=get_storage_access_key_id(),
        storage_secret_access_key=get_storage_secret_access_key(),
        storage_public_base_url=get_storage_public_base_url(),
        storage_key_prefix=get_storage_key_prefix(),
        max_file_size=get_upload_max_file_size(),
        allowed_mime_types=get_upload_allowed_mime_types(),
        allowed_extensions=get_upload_allowed_extensions(),
        webhook_default_url=get_webhook_default_url(),
        webhook_urls={
            "cv-parser": get_webhook_cv_parser_url(),
            "jd-parser": get_webhook_jd_parser_url(),
            "gap-analyzer": get_webhook_gap_analyzer_url(),
            "complete-analysis": get_webhook_complete_analysis_url(),
        },
        webhook_timeout_seconds=get_webhook_timeout_seconds(),
        webhook_api_key=get_webhook_api_key(),
        use_proxy=get_use_proxy(),
        proxy_server_url=get_proxy_server_url(),
        cors_allow_origins=get_cors_allow_origins(),
    )
