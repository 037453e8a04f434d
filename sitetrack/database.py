from typing import AsyncIterator, Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool
import logging

from sitetrack.models import Base


logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and hands out sessions.

    One instance is created per application and disposed when the
    application shuts down.
    """

    def __init__(self, url: str, echo: bool = False, engine: Optional[AsyncEngine] = None):
        self.url = url
        if engine is None:
            kw = {"echo": echo, "future": True}
            if url.startswith("sqlite"):
                # An in-memory database only exists on a single connection
                kw["poolclass"] = StaticPool
                kw["connect_args"] = {"check_same_thread": False}
            else:
                kw["pool_pre_ping"] = True
            engine = create_async_engine(url, **kw)
        self.engine = engine

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Create all tables that do not exist yet"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured (dialect=%s)", self.engine.dialect.name)

    async def drop_all(self) -> None:
        """Drop every table this package defines"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that is closed when the caller is done with it"""
        async with self.session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()
