"""
Health API

Liveness endpoint, reachable without credentials.
"""
from fastapi import APIRouter

from ..schemas.sync import utc_now_iso

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": utc_now_iso()}
