"""FastAPI dependencies that hand routes a request-scoped storage."""
from typing import Annotated, AsyncIterator
from fastapi import Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sitetrack.config import Settings
from sitetrack.database import Database
from sitetrack.schemas import MAX_ROW_ID
from sitetrack.storage import DatabaseStorage, Storage


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError(
            "database not found on app.state. "
            "Was the application built with create_app()?"
        )
    return database


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """Dependency to get a database session for the current request"""
    async for session in database.session():
        yield session


def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    return DatabaseStorage(db)


# `/{id}` path segments; out-of-range ids are a 400, not a database error
PathId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
