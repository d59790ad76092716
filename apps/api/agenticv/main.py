import httpx
from botocore.client import BaseClient
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agenticv.config import Settings, load_settings
from agenticv.log import configure_logging
from agenticv.routers import pages_router, relay_router, uploads_router, webhooks_router


def create_app(
    settings: Settings | None = None,
    *,
    storage_client: BaseClient | None = None,
    webhook_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the API with an explicit configuration value.

    ``storage_client`` and ``webhook_transport`` replace the real boto3 client
    and network transport; when omitted they are created from ``settings``.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AgentiCV API",
        description="CV / job description upload → object storage → workflow webhooks",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.storage_client = storage_client
    app.state.webhook_transport = webhook_transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pages_router)
    app.include_router(uploads_router)
    app.include_router(webhooks_router)
    app.include_router(relay_router)

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok", "service": "agenticv-api"}

    return app


app = create_app()
