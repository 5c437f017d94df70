"""
Collection Store Base

Failure-tolerant load/save shared by the project store and the history
log. An unreadable collection is treated as empty; a failed save is
logged and the caller keeps its in-memory result.
"""
import asyncio
import logging
from typing import Any, Dict

from ..errors import StorageReadError, StorageWriteError
from .backends import DocumentBackend

logger = logging.getLogger(__name__)


class CollectionStore:
    """One backing collection plus the lock serializing its read-modify-write cycles."""

    collection: str = ""

    def __init__(self, backend: DocumentBackend, collection: str = None):
        self.backend = backend
        if collection:
            self.collection = collection
        self._lock = asyncio.Lock()

    async def _load(self) -> Dict[str, Any]:
        try:
            return await self.backend.load(self.collection)
        except StorageReadError as e:
            logger.warning(f"Treating '{self.collection}' as empty, read failed: {e.reason}")
            return {}

    async def _save(self, document: Dict[str, Any]) -> bool:
        try:
            await self.backend.save(self.collection, document)
            return True
        except StorageWriteError as e:
            logger.error(
                f"Could not persist '{self.collection}', change kept in memory only: {e.reason}"
            )
            return False
