import pytest

from claude_sync.errors import ProjectNotFoundError
from claude_sync.schemas.sync import SyncPayload


@pytest.mark.asyncio
async def test_sync_without_summary_never_touches_history(service):
    await service.sync_project("demo", SyncPayload(files={"a.py": "print(1)"}))
    await service.sync_project("demo", SyncPayload(metadata={"lang": "py"}))

    result = await service.project_history("demo", 20)
    assert result == {"project": "demo", "history": []}


@pytest.mark.asyncio
async def test_history_entry_is_raw_payload_not_merged_record(service):
    await service.sync_project("demo", SyncPayload(summary="first", claude_md="# rules"))
    await service.sync_project("demo", SyncPayload(summary="second"))

    history = (await service.project_history("demo", 20))["history"]
    assert history[0]["summary"] == "second"
    assert "claude_md" not in history[0]
    assert history[1]["claude_md"] == "# rules"

    project = await service.get_project("demo")
    assert project["claude_md"] == "# rules"
    assert project["summary"] == "second"


@pytest.mark.asyncio
async def test_sync_record_and_history_share_timestamp(service):
    result = await service.sync_project("demo", SyncPayload(summary="init"))

    project = await service.get_project("demo", include_history=5)
    assert result == {"success": True, "project": "demo", "updated_at": project["updated_at"]}
    assert project["history"][0]["synced_at"] == result["updated_at"]


@pytest.mark.asyncio
async def test_get_project_optional_sections(service):
    await service.sync_project("demo", SyncPayload(summary="one", files={"a": "1"}))
    await service.sync_project("demo", SyncPayload(summary="two"))
    await service.sync_project("demo", SyncPayload(summary="three"))

    plain = await service.get_project("demo")
    assert "files" not in plain
    assert "history" not in plain

    full = await service.get_project("demo", include_files=True, include_history=2)
    assert full["files"] == {"a": "1"}
    assert [e["summary"] for e in full["history"]] == ["three", "two"]


@pytest.mark.asyncio
async def test_delete_is_complete_and_idempotent(service):
    await service.sync_project("p", SyncPayload(summary="x", claude_md="y"))

    assert await service.delete_project("p") == {"success": True, "deleted": "p"}
    with pytest.raises(ProjectNotFoundError):
        await service.get_project("p")
    assert (await service.project_history("p", 20))["history"] == []

    assert await service.delete_project("p") == {"success": True, "deleted": "p"}


@pytest.mark.asyncio
async def test_list_projects_newest_first(service):
    for name in ("a", "b", "c"):
        await service.sync_project(name, SyncPayload(summary=name))
    await service.sync_project("a", SyncPayload(metadata={"touched": True}))

    listed = (await service.list_projects())["projects"]
    assert [p["project"] for p in listed] == ["a", "c", "b"]
    assert listed[0]["summary"] == "a"


@pytest.mark.asyncio
async def test_empty_summary_neither_overwrites_nor_appends(service):
    await service.sync_project("demo", SyncPayload(summary="init"))
    await service.sync_project("demo", SyncPayload(summary=""))
    await service.sync_project("demo", SyncPayload(summary=0, metadata=[]))

    project = await service.get_project("demo")
    assert project["summary"] == "init"
    assert project["metadata"] == []
    history = (await service.project_history("demo", 20))["history"]
    assert [e["summary"] for e in history] == ["init"]


@pytest.mark.asyncio
async def test_empty_files_object_is_returned(service):
    await service.sync_project("demo", SyncPayload(files={}))

    project = await service.get_project("demo", include_files=True)
    assert project["files"] == {}
