"""
Document Backends

Durable mapping from a collection name ("projects", "history") to one
JSON object. Backends report failures as StorageReadError /
StorageWriteError; recovering from them is the stores' job.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from ..config import Settings
from ..database import SyncDocument, create_engine, create_session_factory, init_db, close_db
from ..errors import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


def _decode(collection: str, raw: str) -> Dict[str, Any]:
    if not raw.strip():
        return {}
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageReadError(collection, f"invalid JSON ({e})") from e
    if not isinstance(document, dict):
        raise StorageReadError(collection, f"expected an object, got {type(document).__name__}")
    return document


def _encode(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


class DocumentBackend(ABC):
    """Whole-collection load/save."""

    async def init(self) -> None:
        """Prepare the medium (create tables, directories)."""

    async def close(self) -> None:
        """Release any held resources."""

    @abstractmethod
    async def load(self, collection: str) -> Dict[str, Any]:
        """Return the stored object, {} if nothing was stored yet."""

    @abstractmethod
    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        """Replace the stored object."""


class JsonFileBackend(DocumentBackend):
    """One pretty-printed JSON file per collection under data_path."""

    def __init__(self, data_path: str):
        self.data_path = Path(data_path)

    def path_for(self, collection: str) -> Path:
        return self.data_path / f"{collection}.json"

    async def init(self) -> None:
        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create data directory {self.data_path}: {e}")

    async def load(self, collection: str) -> Dict[str, Any]:
        path = self.path_for(collection)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(collection, str(e)) from e
        return _decode(collection, raw)

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        path = self.path_for(collection)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{collection}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(_encode(document))
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteError(collection, str(e)) from e


class MemoryBackend(DocumentBackend):
    """In-process collections; contents vanish with the process."""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def load(self, collection: str) -> Dict[str, Any]:
        return deepcopy(self._documents.get(collection, {}))

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        self._documents[collection] = deepcopy(document)


class SqlDocumentBackend(DocumentBackend):
    """Each collection is one row of sync_documents holding JSON text."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory = None
        self._tables_ready = False

    async def _ensure_ready(self) -> None:
        # Request-scoped hosts may never run the lifespan hook
        if self._engine is None:
            self._engine = create_engine(self.database_url, echo=self.echo)
            self._session_factory = create_session_factory(self._engine)
        if not self._tables_ready:
            await init_db(self._engine)
            self._tables_ready = True

    async def init(self) -> None:
        await self._ensure_ready()

    async def close(self) -> None:
        await close_db(self._engine)
        self._engine = None
        self._session_factory = None
        self._tables_ready = False

    async def load(self, collection: str) -> Dict[str, Any]:
        try:
            await self._ensure_ready()
            async with self._session_factory() as session:
                result = await session.execute(
                    select(SyncDocument.body).where(SyncDocument.name == collection)
                )
                raw = result.scalar_one_or_none()
        except Exception as e:
            raise StorageReadError(collection, str(e)) from e
        if raw is None:
            return {}
        return _decode(collection, raw)

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        try:
            body = _encode(document)
            await self._ensure_ready()
            async with self._session_factory() as session:
                row = await session.get(SyncDocument, collection)
                if row is None:
                    session.add(SyncDocument(name=collection, body=body))
                else:
                    row.body = body
                await session.commit()
        except Exception as e:
            raise StorageWriteError(collection, str(e)) from e


def build_backend(settings: Settings) -> DocumentBackend:
    """Select the backend named by settings.storage_backend."""
    if settings.storage_backend == "sqlite":
        return SqlDocumentBackend(settings.database_url, echo=settings.debug)
    if settings.storage_backend == "memory":
        return MemoryBackend()
    return JsonFileBackend(settings.data_path)
