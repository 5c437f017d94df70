"""
Services module for Claude Sync.
"""
from .sync_service import SyncService

__all__ = [
    "SyncService",
]
