"""
Seeding of the demo accounts.

Creates one accountant and one client so a fresh store is usable right away.
Called from the application lifespan when SEED_DEMO_USERS is enabled; can
also be run directly against the sql store:

    python -m backend.seed_users
"""

import asyncio
import logging

from backend.app.core.config import settings
from backend.app.core.security import get_password_hash
from backend.app.db.session import build_engine
from backend.app.models.enums import UserRole
from backend.app.schemas.user import UserCreate
from backend.app.store.base import RecordStore
from backend.app.store.sql import SqlRecordStore

logger = logging.getLogger("finance.seed")

DEMO_USERS = [
    {
        "username": "accountant",
        "password": "accountant123",
        "email": "accountant@example.com",
        "full_name": "Comptable Admin",
        "role": UserRole.ACCOUNTANT,
    },
    {
        "username": "client",
        "password": "client123",
        "email": "client@example.com",
        "full_name": "Jean Dupont",
        "role": UserRole.CLIENT,
    },
]


async def seed_users(store: RecordStore) -> int:
    """
    Create the demo accountant and client if they do not exist yet.
    
    On an empty store the accountant gets id 1 and the client id 2.
    
    Returns:
        Number of users created
    """
    created = 0
    for demo in DEMO_USERS:
        if await store.get_user_by_username(demo["username"]):
            logger.info("Demo user already exists, skipping", extra={"username": demo["username"]})
            continue
        
        user = await store.create_user(UserCreate(
            username=demo["username"],
            hashed_password=get_password_hash(demo["password"]),
            email=demo["email"],
            full_name=demo["full_name"],
            role=demo["role"],
        ))
        logger.info("Created demo user", extra={"user_id": user.id, "username": user.username})
        created += 1
    return created


async def main():
    store = SqlRecordStore(build_engine(settings.database_url))
    try:
        await store.create_schema()
        created = await seed_users(store)
        print(f"Seeded {created} user(s) into {settings.database_url}")
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
