"""
Claude Sync Configuration

Environment-based configuration. The shared secret is never hardcoded;
a missing secret is reported per request rather than at startup so the
health endpoint stays reachable.
"""
from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Shared secret compared against the bearer token / ?key= parameter
    claude_sync_key: str = ""

    # Storage
    storage_backend: Literal["file", "sqlite", "memory"] = "file"
    data_path: str = "./data"
    database_url: str = "sqlite+aiosqlite:///./claude_sync.db"

    # Server process
    host: str = "0.0.0.0"
    port: int = 3000

    # Largest accepted request body
    max_body_bytes: int = Field(10 * 1024 * 1024, gt=0)

    # Debug mode (verbose low-level logging)
    debug: bool = False

    # Follow-through mode (structured step-by-step execution tracing)
    follow_through: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("claude_sync_key", mode="before")
    @classmethod
    def validate_not_placeholder(cls, v: str) -> str:
        """Ensure the shared secret is not a placeholder value."""
        if v and "your-" in str(v).lower():
            return ""
        return v

    @property
    def api_key_configured(self) -> bool:
        return bool(self.claude_sync_key)


@lru_cache
def get_settings() -> Settings:
    """Settings for the long-running server."""
    return Settings()


def serverless_settings() -> Settings:
    """
    Settings for the request-scoped deployment.

    Only /tmp is writable on ephemeral-filesystem hosts, so data lands
    there unless DATA_PATH is set explicitly.
    """
    settings = Settings()
    if "data_path" not in settings.model_fields_set:
        settings = settings.model_copy(update={"data_path": "/tmp"})
    return settings
