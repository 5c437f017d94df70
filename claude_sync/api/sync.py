"""
Sync API

Endpoints for saving and retrieving per-project context. The shared
secret is checked before routing, in application.create_app.
"""
import json
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from ..config import Settings
from ..errors import InvalidPayloadError, PayloadTooLargeError
from ..schemas.sync import SyncPayload
from ..services import SyncService
from ..store import parse_int
from .deps import get_settings, get_sync_service

router = APIRouter(prefix="/sync", tags=["sync"])


async def _read_payload(request: Request, settings: Settings) -> SyncPayload:
    """Parse the JSON body; an empty or non-object body is an empty payload."""
    body = await request.body()
    if len(body) > settings.max_body_bytes:
        raise PayloadTooLargeError()
    if not body.strip():
        return SyncPayload()
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidPayloadError()
    if not isinstance(data, dict):
        return SyncPayload()
    return SyncPayload.model_validate(data)


@router.get("")
async def list_projects(
    service: SyncService = Depends(get_sync_service),
):
    """List all projects, most recently updated first."""
    return await service.list_projects()


@router.get("/{project}")
async def get_project(
    project: str,
    include_files: Optional[str] = Query(None, description="'true' to include the file snapshot"),
    include_history: Optional[str] = Query(None, description="Number of history entries to attach"),
    service: SyncService = Depends(get_sync_service),
):
    """Get one project's current state."""
    return await service.get_project(
        project,
        include_files=include_files == "true",
        include_history=parse_int(include_history, default=0),
    )


@router.post("/{project}")
async def sync_project(
    project: str,
    request: Request,
    service: SyncService = Depends(get_sync_service),
    settings: Settings = Depends(get_settings),
):
    """
    Merge-write a project.

    Fields omitted from the body keep their previous values. A body with
    a summary is also recorded in the project's history.
    """
    payload = await _read_payload(request, settings)
    return await service.sync_project(project, payload)


@router.delete("/{project}")
async def delete_project(
    project: str,
    service: SyncService = Depends(get_sync_service),
):
    """Delete a project and its entire history."""
    return await service.delete_project(project)


@router.get("/{project}/history")
async def get_history(
    project: str,
    limit: Optional[str] = Query(None, description="Entries to return, 1-100 (default 20)"),
    service: SyncService = Depends(get_sync_service),
):
    """Get a project's sync history, newest first."""
    return await service.project_history(project, limit)
