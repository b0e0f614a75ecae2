import logging

from sqlalchemy.ext.asyncio import AsyncSession

from filevault.core.security import hash_password
from filevault.models.user import User
from filevault.repositories.users import UserStore

log = logging.getLogger(__name__)

DEMO_USERS = (
    ("demo", "demo@cloudvault.com", "demo"),
    ("testuser", "test@example.com", "test"),
)


async def seed_demo_users(session: AsyncSession) -> int:
    """Create the demo accounts that are missing. Returns how many were added."""
    users = UserStore(session)
    created = 0
    for username, email, password in DEMO_USERS:
        if await users.get_by_email(email) or await users.get_by_username(username):
            continue
        await users.save(User(username=username, email=email, hashed_password=hash_password(password)))
        log.info(f"Seeded user {username} ({email})")
        created += 1
    return created
