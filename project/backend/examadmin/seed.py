"""
One-off bootstrap of the first admin account.

Reads DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD and creates the admin
only if no admin with that email exists yet. Existing admins are never
modified.
"""

import asyncio
import logging
import sys
from datetime import datetime, timezone

from .config import settings
from .services.store import TestStore
from .utils.database import close_db_connection, connect_to_db
from .utils.security import get_password_hash, normalize_email

logger = logging.getLogger(__name__)


async def ensure_default_admin(store: TestStore, email: str, password: str) -> bool:
    """
    Returns True when a new admin was created.
    """
    email = normalize_email(email)
    if await store.find_admin_by_email(email):
        logger.info(f"Admin {email} already exists, leaving it untouched")
        return False

    now = datetime.now(timezone.utc)
    inserted_id = await store.create_admin({
        "email": email,
        "password": get_password_hash(password),
        "createdAt": now,
        "updatedAt": now,
    })
    if inserted_id is None:
        logger.info(f"Admin {email} was created concurrently, leaving it untouched")
        return False

    logger.info(f"Created admin {email}")
    return True


async def _seed() -> int:
    if not settings.DEFAULT_ADMIN_EMAIL or not settings.DEFAULT_ADMIN_PASSWORD:
        logger.error("DEFAULT_ADMIN_EMAIL and DEFAULT_ADMIN_PASSWORD must be set")
        return 1

    db = await connect_to_db()
    try:
        await ensure_default_admin(
            TestStore(db), settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD
        )
    finally:
        await close_db_connection()
    return 0


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(asyncio.run(_seed()))


if __name__ == "__main__":
    main()
