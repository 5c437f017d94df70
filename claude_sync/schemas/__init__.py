# Sync Schemas
from .sync import ProjectRecord, HistoryEntry, ProjectSummary, SyncPayload, utc_now_iso

__all__ = [
    "ProjectRecord",
    "HistoryEntry",
    "ProjectSummary",
    "SyncPayload",
    "utc_now_iso",
]
