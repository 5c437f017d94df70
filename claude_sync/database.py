"""
Claude Sync Database Configuration

SQLAlchemy async engine used by the SQL document backend. SQLite via
aiosqlite by default; any async SQLAlchemy URL works.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, DateTime, event
from sqlalchemy.pool import NullPool
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class SyncDocument(Base):
    """
    One persisted collection ("projects" or "history").

    The whole collection is stored as a single JSON object and rewritten
    on every save, mirroring the file layout.
    """
    __tablename__ = "sync_documents"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<SyncDocument(name={self.name}, bytes={len(self.body)})>"


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; SQLite connections get WAL and a busy timeout."""
    is_sqlite = database_url.startswith("sqlite")
    engine = create_async_engine(
        database_url,
        echo=echo,
        future=True,
        poolclass=NullPool if is_sqlite else None,
        connect_args={"timeout": 30, "check_same_thread": False} if is_sqlite else {},
    )

    if is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def configure_sqlite(dbapi_connection, connection_record):
            """Configure SQLite for better concurrency."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: Optional[AsyncEngine]) -> None:
    """Close database connections."""
    if engine is not None:
        await engine.dispose()
