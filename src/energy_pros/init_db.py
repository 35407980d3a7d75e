# src/energy_pros/init_db.py
"""Create the schema and load development fixtures.

Run with ``python -m energy_pros.init_db``.
"""

from __future__ import annotations

import logging

from energy_pros.core.security import hash_password
from energy_pros.core.settings import settings
from energy_pros.db.session import create_tables
from energy_pros.models import User
from energy_pros.repositories import open_storage
from energy_pros.repositories.base import Storage

logger = logging.getLogger(__name__)

DEMO_USERNAME = "testuser"
DEMO_EMAIL = "test@example.com"
DEMO_FULL_NAME = "Test User"
DEMO_POST_CONTENT = (
    "This is a sample post for the energy community. "
    "Looking forward to connecting with fellow professionals!"
)
DEMO_POST_HASHTAG = "#gridcode"


def seed_demo_data(storage: Storage) -> User | None:
    """Create the demo member, a sample post and the configured invite codes.

    Everything is written in one transaction. Returns the demo user when it
    was created and None when it already existed.
    """
    if storage.get_user_by_email(DEMO_EMAIL) is not None:
        logger.debug("Demo data already present, skipping seed")
        return None

    with storage.transaction():
        user = storage.create_user(
            username=DEMO_USERNAME,
            email=DEMO_EMAIL,
            password=hash_password(settings.demo_user_password),
            full_name=DEMO_FULL_NAME,
        )
        storage.create_post(
            content=DEMO_POST_CONTENT,
            hashtag=DEMO_POST_HASHTAG,
            user_id=user.id,
            is_anonymous=False,
            post_type="general",
            structured_data=None,
        )
        for code in settings.seed_invite_codes:
            if storage.get_invite(code) is None:
                storage.create_invite(code=code, invited_by_user_id=user.id)

    logger.info(
        "Seeded demo user %s with %d invite codes", user.username, len(settings.seed_invite_codes)
    )
    return user


def init_db() -> None:
    """Create all tables and seed the demo data."""
    if settings.storage_backend == "sql":
        create_tables()
    storage = open_storage()
    try:
        seed_demo_data(storage)
    finally:
        storage.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    init_db()
    print("Database initialized.")
