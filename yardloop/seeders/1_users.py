import asyncio
import logging

from faker import Faker
from sqlmodel import select

from yardloop.core.logging_config import setup_logging
from yardloop.db.database import async_session
from yardloop.models.user_model import User
from yardloop.schemas.enums import PreferredContact

logger = logging.getLogger(__name__)

fake = Faker()
NUM_USERS = 10
DEFAULT_USERNAME = "orlando_seller"


async def seed_users():
    async with async_session() as session:
        created = 0
        usernames = [DEFAULT_USERNAME] + [
            fake.unique.user_name() for _ in range(NUM_USERS)
        ]

        for username in usernames:
            result = await session.execute(select(User).where(User.username == username))
            if result.scalar_one_or_none():
                logger.info("User %s already exists, skipping", username)
                continue

            session.add(
                User(
                    # seeded accounts are not linked to a real firebase identity
                    firebase_uid=f"seed-{username}",
                    username=username,
                    avatarurl=f"https://i.pravatar.cc/150?u={username}",
                    bio=fake.sentence(nb_words=12),
                    preferred_contact=PreferredContact.MESSAGES,
                )
            )
            created += 1

        await session.commit()
        logger.info("Seeded %d users", created)


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_users())
