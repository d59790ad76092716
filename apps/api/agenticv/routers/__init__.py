from agenticv.routers.pages import router as pages_router
from agenticv.routers.relay import router as relay_router
from agenticv.routers.uploads import router as uploads_router
from agenticv.routers.webhooks import router as webhooks_router

__all__ = ["pages_router", "relay_router", "uploads_router", "webhooks_router"]
