"""Shared pytest fixtures for the SiteTrack test suite.

Every test gets its own SQLite in-memory database, so the suite runs
without PostgreSQL and tests never see each other's rows.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from sitetrack.config import Settings
from sitetrack.database import Database
from sitetrack.storage import DatabaseStorage

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Database / storage
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def database():
    db = Database(SQLITE_URL)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as s:
        yield s


@pytest.fixture
def storage(session) -> DatabaseStorage:
    return DatabaseStorage(session)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=SQLITE_URL, google_maps_api_key="test-maps-key")


@pytest_asyncio.fixture
async def client(settings, database):
    from sitetrack.main import create_app

    app = create_app(settings, database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Sample rows
# ---------------------------------------------------------------------------

def user_data(username: str, name: str, **overrides) -> dict:
    data = {
        "username": username,
        "password": "not-a-real-hash",
        "name": name,
        "email": f"{username}@example.com",
    }
    data.update(overrides)
    return data


@pytest_asyncio.fixture
async def alice(storage):
    return await storage.create_user(user_data("alice", "Alice Smith", discipline="design"))


@pytest_asyncio.fixture
async def bob(storage):
    return await storage.create_user(user_data("bob", "Bob Jones", discipline="commercial"))


@pytest_asyncio.fixture
async def hospital(storage):
    return await storage.create_project({"name": "Hospital Extension", "project_number": "H0001"})


@pytest_asyncio.fixture
async def school(storage):
    return await storage.create_project({"name": "Primary School", "status": "precon"})
