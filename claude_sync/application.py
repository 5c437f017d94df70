"""
Claude Sync Application

FastAPI application factory shared by the long-running server and the
request-scoped handler. Importing this module builds nothing.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import SyncError, RouteNotFoundError
from .api import health_router, health, sync_router
from .api.deps import authenticate, requires_auth
from .services import SyncService
from .tracer import setup_follow_through_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def configure_logging(settings: Settings) -> None:
    """Configure logging based on mode."""
    if settings.debug:
        log_level = logging.DEBUG
    elif settings.follow_through:
        log_level = logging.WARNING  # Suppress normal logs, let tracer handle output
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Quiet down noisy loggers when not in debug mode
    if not settings.debug:
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    setup_follow_through_logging(settings)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None, service: Optional[SyncService] = None) -> FastAPI:
    """
    Build the API for either deployment.

    Every route is reachable with and without the /api prefix, so the
    request-scoped and long-running entry points behave identically.
    """
    settings = settings or get_settings()
    service = service or SyncService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting Claude Sync ({settings.storage_backend} storage)...")
        if not settings.api_key_configured:
            logger.warning("CLAUDE_SYNC_KEY is not set; authenticated routes will return 500")
        await service.startup()

        yield

        logger.info("Shutting down Claude Sync...")
        await service.shutdown()

    app = FastAPI(
        title="Claude Sync",
        description="""
        Persist and retrieve per-project context for an AI coding assistant.

        ## Features
        - **Merge-writes**: fields omitted from a sync keep their previous values
        - **History**: the last 50 summarized syncs per project
        - **Shared secret**: bearer header or `key` query parameter
        """,
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.sync_service = service

    @app.middleware("http")
    async def require_shared_secret(request: Request, call_next):
        """Authenticate every non-health request before it is routed."""
        if request.method != "OPTIONS" and requires_auth(request):
            try:
                authenticate(request, settings)
            except SyncError as exc:
                return _error_response(exc.status_code, exc.message)
        return await call_next(request)

    # Registered last so it wraps the auth check
    @app.middleware("http")
    async def apply_cors(request: Request, call_next):
        """Permissive CORS on every response; OPTIONS never reaches a route."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(SyncError)
    async def handle_sync_error(request: Request, exc: SyncError):
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            not_found = RouteNotFoundError()
            return _error_response(not_found.status_code, not_found.message)
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(400, "Invalid request")

    # Include routers, unprefixed and under /api
    for prefix in ("", API_PREFIX):
        app.include_router(health_router, prefix=prefix)
        app.include_router(sync_router, prefix=prefix)
    app.add_api_route(API_PREFIX, health, methods=["GET"], include_in_schema=False)

    return app
