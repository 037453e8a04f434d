"""Create the SiteTrack tables and, with ``--seed``, load sample data.

    python -m sitetrack.scripts.init_db [--seed]
"""
import asyncio
import sys
from datetime import datetime

from sitetrack.config import settings
from sitetrack.database import Database
from sitetrack.security import get_password_hash
from sitetrack.storage import DatabaseStorage, Storage

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_EMAIL = "admin@sitetrack.local"
DEFAULT_ADMIN_PASSWORD = "admin123"

SAMPLE_PROJECTS = [
    {
        "project_number": "W0013",
        "name": "Municipal Water Treatment",
        "status": "construction",
        "start_on_site_date": datetime(2024, 6, 1),
        "contract_completion_date": datetime(2025, 10, 30),
        "construction_completion_date": datetime(2025, 8, 15),
        "value": "£12300000",
        "retention": "£0.6",
        "postcode": "DN4 5HT",
        "description": "Water treatment facility upgrade with new filtration and automated monitoring.",
    },
    {
        "project_number": "L0011",
        "name": "Luxury Hotel Development",
        "status": "construction",
        "start_on_site_date": datetime(2024, 5, 1),
        "contract_completion_date": datetime(2027, 6, 15),
        "construction_completion_date": datetime(2027, 5, 10),
        "value": "£22500000",
        "retention": "£1.1",
        "postcode": "YO31 0UR",
        "description": "Five-star hotel with conference facilities, spa and restaurants.",
    },
]


async def seed(storage: Storage) -> None:
    """Add the default admin and sample projects unless they already exist"""
    if await storage.get_user_by_username(DEFAULT_ADMIN_USERNAME) is None:
        await storage.create_user({
            "username": DEFAULT_ADMIN_USERNAME,
            "password": get_password_hash(DEFAULT_ADMIN_PASSWORD),
            "name": "Admin User",
            "email": DEFAULT_ADMIN_EMAIL,
            "discipline": "operations",
        })
        print(f"Default admin user '{DEFAULT_ADMIN_USERNAME}' created.")
    else:
        print(f"Admin user '{DEFAULT_ADMIN_USERNAME}' already exists.")

    if await storage.count_projects() == 0:
        for project in SAMPLE_PROJECTS:
            await storage.create_project(project)
        print(f"Created {len(SAMPLE_PROJECTS)} sample projects.")


async def init_db(database: Database, with_seed: bool = False) -> None:
    """Initialize database tables, optionally with sample data"""
    await database.create_all()
    if with_seed:
        async for session in database.session():
            await seed(DatabaseStorage(session))


async def main(argv) -> None:
    database = Database(settings.database_url, echo=settings.database_echo)
    try:
        await init_db(database, with_seed="--seed" in argv)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
