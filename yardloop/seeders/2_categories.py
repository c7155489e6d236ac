import asyncio
import logging

from sqlmodel import select

from yardloop.core.logging_config import setup_logging
from yardloop.db.database import async_session
from yardloop.models.category_model import Category

logger = logging.getLogger(__name__)

CATEGORIES_TO_SEED = [
    "Books",
    "Clothing",
    "Electronics",
    "Furniture",
    "Home & Garden",
    "Kitchen",
    "Sports & Outdoors",
    "Tools",
    "Toys",
]


async def seed_categories():
    async with async_session() as session:
        for name in CATEGORIES_TO_SEED:
            result = await session.execute(select(Category).where(Category.name == name))
            if result.scalar_one_or_none():
                logger.info("Category %s already exists", name)
                continue
            session.add(Category(name=name))
            logger.info("Added category %s", name)

        await session.commit()
        logger.info("Category seeding complete")


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_categories())
