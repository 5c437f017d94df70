import json

import pytest

from claude_sync.config import Settings
from claude_sync.errors import StorageReadError, StorageWriteError
from claude_sync.store import (
    JsonFileBackend,
    MemoryBackend,
    SqlDocumentBackend,
    build_backend,
)


@pytest.mark.asyncio
async def test_file_backend_missing_collection_is_empty(tmp_path):
    backend = JsonFileBackend(str(tmp_path / "nowhere"))
    assert await backend.load("projects") == {}


@pytest.mark.asyncio
async def test_file_backend_writes_pretty_json(tmp_path):
    backend = JsonFileBackend(str(tmp_path / "data"))
    await backend.save("projects", {"demo": {"summary": "init"}})

    path = tmp_path / "data" / "projects.json"
    text = path.read_text(encoding="utf-8")
    assert text == json.dumps({"demo": {"summary": "init"}}, indent=2)
    assert await backend.load("projects") == {"demo": {"summary": "init"}}
    # No temp files left behind
    assert [p.name for p in path.parent.iterdir()] == ["projects.json"]


@pytest.mark.asyncio
async def test_file_backend_corrupt_file_raises_read_error(tmp_path):
    (tmp_path / "history.json").write_text("{not json", encoding="utf-8")
    backend = JsonFileBackend(str(tmp_path))

    with pytest.raises(StorageReadError) as exc_info:
        await backend.load("history")
    assert exc_info.value.collection == "history"


@pytest.mark.asyncio
async def test_file_backend_non_object_raises_read_error(tmp_path):
    (tmp_path / "projects.json").write_text("[1, 2, 3]", encoding="utf-8")
    backend = JsonFileBackend(str(tmp_path))

    with pytest.raises(StorageReadError):
        await backend.load("projects")


@pytest.mark.asyncio
async def test_file_backend_unwritable_path_raises_write_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    backend = JsonFileBackend(str(blocker / "data"))

    with pytest.raises(StorageWriteError):
        await backend.save("projects", {})


@pytest.mark.asyncio
async def test_memory_backend_copies_documents():
    backend = MemoryBackend()
    document = {"demo": {"files": {"a.py": "1"}}}
    await backend.save("projects", document)

    document["demo"]["files"]["a.py"] = "changed"
    loaded = await backend.load("projects")
    assert loaded["demo"]["files"]["a.py"] == "1"

    loaded["demo"]["files"]["b.py"] = "2"
    assert "b.py" not in (await backend.load("projects"))["demo"]["files"]


@pytest.mark.asyncio
async def test_sql_backend_stores_collections_independently(tmp_path):
    backend = SqlDocumentBackend(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")
    try:
        assert await backend.load("projects") == {}

        await backend.save("projects", {"demo": {"summary": "init"}})
        await backend.save("history", {"demo": [{"summary": "init"}]})
        await backend.save("projects", {"demo": {"summary": "second"}})

        assert await backend.load("projects") == {"demo": {"summary": "second"}}
        assert await backend.load("history") == {"demo": [{"summary": "init"}]}
    finally:
        await backend.close()


def test_build_backend_follows_settings(tmp_path):
    def make(kind):
        return build_backend(Settings(_env_file=None, storage_backend=kind, data_path=str(tmp_path)))

    assert isinstance(make("file"), JsonFileBackend)
    assert isinstance(make("memory"), MemoryBackend)
    assert isinstance(make("sqlite"), SqlDocumentBackend)
