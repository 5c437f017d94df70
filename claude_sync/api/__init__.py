# API Routes
from .health import router as health_router, health
from .sync import router as sync_router

__all__ = [
    "health_router",
    "health",
    "sync_router",
]
