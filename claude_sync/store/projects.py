"""
Project Store

Current state of every project, keyed by project name. Writes overlay
only the fields present in the payload onto the previous record.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..errors import ProjectNotFoundError
from ..schemas.sync import ProjectRecord, ProjectSummary, is_present, parse_timestamp
from .base import CollectionStore

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

MERGEABLE_FIELDS = ("summary", "config_document", "files", "metadata")


def _newest_first_key(value: Any) -> datetime:
    return parse_timestamp(value) or _OLDEST


class ProjectStore(CollectionStore):
    """Owns ProjectRecords; the only mutations are merge and delete."""

    collection = "projects"

    async def list_all(self) -> List[ProjectSummary]:
        """Every known project, most recently updated first."""
        projects = await self._load()
        summaries = [
            ProjectSummary(
                name=name,
                summary=data.get("summary") if isinstance(data, dict) else None,
                updated_at=data.get("updated_at") if isinstance(data, dict) else None,
            )
            for name, data in projects.items()
        ]
        summaries.sort(key=lambda s: _newest_first_key(s.updated_at), reverse=True)
        return summaries

    async def get(self, name: str) -> ProjectRecord:
        """The full record for name; raises ProjectNotFoundError if absent."""
        projects = await self._load()
        data = projects.get(name)
        if not isinstance(data, dict):
            raise ProjectNotFoundError(name)
        return ProjectRecord.model_validate(data)

    async def merge(self, name: str, partial: Dict[str, Any], timestamp: str) -> ProjectRecord:
        """
        Overlay the present fields of partial onto the existing record.

        partial is keyed by ProjectRecord field names; null, false, 0 and ""
        count as omitted. A missing record is treated as empty, so this never
        fails because the key is absent.
        """
        async with self._lock:
            projects = await self._load()
            existing = projects.get(name)
            record = ProjectRecord.model_validate(existing if isinstance(existing, dict) else {})

            updates = {
                field: value
                for field, value in partial.items()
                if field in MERGEABLE_FIELDS and is_present(value)
            }
            updates["updated_at"] = timestamp
            merged = record.model_copy(update=updates)

            projects[name] = merged.to_document()
            await self._save(projects)

        logger.debug(f"Merged {sorted(updates)} into project '{name}'")
        return merged

    async def delete(self, name: str) -> bool:
        """Remove name if present. Returns whether it existed."""
        async with self._lock:
            projects = await self._load()
            existed = projects.pop(name, None) is not None
            await self._save(projects)
        return existed
