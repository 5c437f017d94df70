# Persistence
from .backends import DocumentBackend, JsonFileBackend, MemoryBackend, SqlDocumentBackend, build_backend
from .projects import ProjectStore
from .history import HistoryLog, MAX_HISTORY_ENTRIES, clamp_limit, parse_int

__all__ = [
    "DocumentBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "SqlDocumentBackend",
    "build_backend",
    "ProjectStore",
    "HistoryLog",
    "MAX_HISTORY_ENTRIES",
    "clamp_limit",
    "parse_int",
]
