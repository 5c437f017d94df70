"""
Sync Schemas

Pydantic models for the project record, history entries and the write
payload. Stored values (summary, claude_md, files, metadata) are opaque
and never validated; absent fields are omitted from documents instead of
being written as null.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, e.g. 2026-10-17T09:30:00.123Z."""
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp; None when missing or malformed."""
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_present(value: Any) -> bool:
    """
    Whether a stored or submitted value counts as set.

    null, false, 0 and "" count as unset; empty objects and lists are set.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class ProjectRecord(BaseModel):
    """Current merged state of one project."""
    summary: Optional[Any] = None
    config_document: Optional[Any] = Field(None, alias="claude_md")
    files: Optional[Any] = None
    metadata: Optional[Any] = None
    updated_at: Optional[Any] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_document(self) -> Dict[str, Any]:
        """Persisted / wire form, keyed by claude_md."""
        return _compact({
            "claude_md": self.config_document,
            "summary": self.summary,
            "files": self.files,
            "metadata": self.metadata,
            "updated_at": self.updated_at,
        })


class HistoryEntry(BaseModel):
    """Raw snapshot of one write payload that carried a summary."""
    summary: Optional[Any] = None
    config_document: Optional[Any] = Field(None, alias="claude_md")
    files: Optional[Any] = None
    metadata: Optional[Any] = None
    synced_at: Optional[Any] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_document(self) -> Dict[str, Any]:
        return _compact({
            "summary": self.summary,
            "claude_md": self.config_document,
            "files": self.files,
            "metadata": self.metadata,
            "synced_at": self.synced_at,
        })


class ProjectSummary(BaseModel):
    """Minimal descriptor returned when listing projects."""
    name: str
    summary: Optional[Any] = None
    updated_at: Optional[Any] = None

    def to_response(self) -> Dict[str, Any]:
        return _compact({
            "project": self.name,
            "summary": self.summary,
            "updated_at": self.updated_at,
        })


class SyncPayload(BaseModel):
    """Body of POST /sync/{project}. Every field is optional."""
    claude_md: Optional[Any] = None
    summary: Optional[Any] = None
    files: Optional[Any] = None
    metadata: Optional[Any] = None

    model_config = {"extra": "ignore"}

    @property
    def has_summary(self) -> bool:
        return is_present(self.summary)

    def present_fields(self) -> Dict[str, Any]:
        """Fields that overwrite the stored record, keyed by ProjectRecord field name."""
        fields = {
            "summary": self.summary,
            "config_document": self.claude_md,
            "files": self.files,
            "metadata": self.metadata,
        }
        return {field: value for field, value in fields.items() if is_present(value)}

    def to_history_entry(self, synced_at: str) -> HistoryEntry:
        return HistoryEntry(
            summary=self.summary,
            config_document=self.claude_md,
            files=self.files,
            metadata=self.metadata,
            synced_at=synced_at,
        )
