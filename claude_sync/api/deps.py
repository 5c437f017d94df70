"""
API Dependencies

Shared-secret authentication and access to the per-app sync service.
"""
import hmac
import logging
from typing import Optional

from fastapi import Request

from ..config import Settings
from ..errors import AuthenticationError, ConfigurationError
from ..services import SyncService

logger = logging.getLogger(__name__)

# Paths reachable without the shared secret
PUBLIC_PATHS = frozenset({
    "/health", "/api", "/api/health",
    "/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json",
})


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sync_service(request: Request) -> SyncService:
    return request.app.state.sync_service


def extract_token(authorization: Optional[str], query_key: Optional[str]) -> Optional[str]:
    """Bearer token from the Authorization header, else the ?key= parameter."""
    token = authorization.replace("Bearer ", "", 1) if authorization else ""
    return token or query_key


def requires_auth(request: Request) -> bool:
    return request.url.path not in PUBLIC_PATHS


def authenticate(request: Request, settings: Settings) -> None:
    """
    Reject the request unless it carries the configured shared secret.

    Runs before routing, so unknown paths are 401 for unauthenticated
    callers and 404 only once the secret checks out.
    """
    if not settings.api_key_configured:
        logger.error("CLAUDE_SYNC_KEY is not configured, rejecting authenticated route")
        raise ConfigurationError()

    token = extract_token(request.headers.get("authorization"), request.query_params.get("key"))
    if not token or not hmac.compare_digest(
        token.encode("utf-8"), settings.claude_sync_key.encode("utf-8")
    ):
        raise AuthenticationError()
