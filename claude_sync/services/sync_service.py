"""
Sync Service

Composes the project store and the history log for each request. Owns
no state of its own; the two stores are written one after the other
with no transaction spanning them.
"""
import logging
from typing import Any, Callable, Dict, Optional

from ..config import Settings
from ..schemas.sync import SyncPayload, is_present, utc_now_iso
from ..store import HistoryLog, ProjectStore, DocumentBackend, build_backend, clamp_limit
from ..tracer import trace_input, trace_step, trace_output, traced

logger = logging.getLogger(__name__)

MODULE = "services.sync"


class SyncService:
    """
    Read and write paths of the sync API.

    Usage:
        service = SyncService.from_settings(settings)
        await service.sync_project("demo", SyncPayload(summary="init"))
        await service.get_project("demo", include_history=5)
    """

    def __init__(
        self,
        projects: ProjectStore,
        history: HistoryLog,
        backend: Optional[DocumentBackend] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.projects = projects
        self.history = history
        self.backend = backend
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], str] = utc_now_iso) -> "SyncService":
        backend = build_backend(settings)
        return cls(ProjectStore(backend), HistoryLog(backend), backend=backend, clock=clock)

    async def startup(self) -> None:
        if self.backend is not None:
            await self.backend.init()

    async def shutdown(self) -> None:
        if self.backend is not None:
            await self.backend.close()

    @traced(MODULE)
    async def list_projects(self) -> Dict[str, Any]:
        summaries = await self.projects.list_all()
        return {"projects": [summary.to_response() for summary in summaries]}

    @traced(MODULE)
    async def get_project(
        self,
        name: str,
        include_files: bool = False,
        include_history: int = 0,
    ) -> Dict[str, Any]:
        """
        One project's record shaped for the API.

        files are only included on request; include_history > 0 attaches
        up to that many history entries, newest first.
        """
        trace_input(MODULE, "project", name)
        record = await self.projects.get(name)

        document = record.to_document()
        response: Dict[str, Any] = {"project": name}
        for key in ("summary", "claude_md", "updated_at", "metadata"):
            if key in document:
                response[key] = document[key]

        if include_files and is_present(record.files):
            response["files"] = record.files

        if include_history > 0:
            entries = await self.history.list(name, include_history)
            response["history"] = [entry.to_document() for entry in entries]
            trace_step(MODULE, f"attached {len(entries)} history entries")

        return response

    @traced(MODULE)
    async def sync_project(self, name: str, payload: SyncPayload) -> Dict[str, Any]:
        """
        Merge-write a project and, when the payload carries a summary,
        append the raw payload to its history.
        """
        trace_input(MODULE, "payload", payload.model_dump(exclude_none=True))
        now = self.clock()

        await self.projects.merge(name, payload.present_fields(), now)
        trace_step(MODULE, f"merged record for '{name}'")

        if payload.has_summary:
            size = await self.history.append(name, payload.to_history_entry(now))
            trace_step(MODULE, f"history for '{name}' now holds {size} entries")

        logger.info(f"Synced project '{name}'")
        result = {"success": True, "project": name, "updated_at": now}
        trace_output(MODULE, "result", result)
        return result

    @traced(MODULE)
    async def delete_project(self, name: str) -> Dict[str, Any]:
        """Remove the record and the entire history. Succeeds for unknown projects too."""
        had_record = await self.projects.delete(name)
        had_history = await self.history.delete_all(name)
        if had_record or had_history:
            logger.info(f"Deleted project '{name}'")
        return {"success": True, "deleted": name}

    @traced(MODULE)
    async def project_history(self, name: str, limit: Any = None) -> Dict[str, Any]:
        entries = await self.history.list(name, clamp_limit(limit))
        return {"project": name, "history": [entry.to_document() for entry in entries]}
