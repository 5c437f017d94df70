import pytest

from claude_sync.config import Settings, serverless_settings
from claude_sync.tracer import traced


def test_defaults(monkeypatch):
    for var in ("CLAUDE_SYNC_KEY", "DATA_PATH", "PORT", "STORAGE_BACKEND"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings(_env_file=None)
    assert settings.api_key_configured is False
    assert settings.storage_backend == "file"
    assert settings.data_path == "./data"
    assert settings.port == 3000
    assert settings.max_body_bytes == 10 * 1024 * 1024


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CLAUDE_SYNC_KEY", "s3cret")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings(_env_file=None)
    assert settings.claude_sync_key == "s3cret"
    assert settings.api_key_configured is True
    assert settings.port == 8080


def test_placeholder_secret_counts_as_unset():
    settings = Settings(_env_file=None, claude_sync_key="your-sync-key-here")
    assert settings.claude_sync_key == ""
    assert settings.api_key_configured is False


def test_serverless_defaults_to_tmp(monkeypatch):
    monkeypatch.delenv("DATA_PATH", raising=False)
    assert serverless_settings().data_path == "/tmp"


def test_serverless_respects_data_path(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_PATH", str(tmp_path))
    assert serverless_settings().data_path == str(tmp_path)


def test_traced_rejects_sync_functions():
    with pytest.raises(TypeError):
        @traced("tests")
        def not_async():
            return None


def test_serverless_app_does_not_build_the_server_app(monkeypatch, tmp_path):
    import importlib
    import sys

    monkeypatch.setenv("DATA_PATH", str(tmp_path))
    monkeypatch.delitem(sys.modules, "claude_sync.main", raising=False)
    serverless = importlib.import_module("claude_sync.serverless")
    serverless = importlib.reload(serverless)

    assert serverless.app.state.settings.data_path == str(tmp_path)
    assert "claude_sync.main" not in sys.modules
