"""Async SQLAlchemy engine + session factory.

PostgreSQL (prod) gets a connection pool. SQLite (dev) runs with foreign keys
switched on so deleting a user also removes their posts, comments, likes and
follow edges.
"""
from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings


def database_url(raw: str) -> str:
    """Pick the async driver for a plain ``postgresql://`` URL."""
    if raw.startswith("postgresql://"):
        return raw.replace("postgresql://", "postgresql+asyncpg://", 1)
    return raw


def engine_options(url: str) -> dict:
    options: dict = {"echo": settings.DB_ECHO}
    if not url.startswith("sqlite"):
        options.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_timeout": 30,
            "pool_recycle": 1800,  # Recycle connections every 30 min
            "pool_pre_ping": True,
        })
    return options


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


_db_url = database_url(settings.DATABASE_URL)

engine = create_async_engine(_db_url, **engine_options(_db_url))

if _db_url.startswith("sqlite"):
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:
    """Dependency for FastAPI, yields an async session."""
    async with async_session() as session:
        yield session
