import asyncio
import logging
import random
from datetime import date, time, timedelta
from decimal import Decimal

from faker import Faker
from sqlmodel import select

from yardloop.core.logging_config import setup_logging
from yardloop.db.database import async_session
from yardloop.models.category_model import Category
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.models.photo_model import ItemPhoto, ListingPhoto
from yardloop.models.user_model import User
from yardloop.schemas.enums import ItemCondition

logger = logging.getLogger(__name__)

fake = Faker()

# public addresses within 10 miles of downtown Orlando
ADDRESSES = [
    ("8001 S Orange Blossom Trail, Orlando, FL 32809", 28.4456, -81.3856),
    ("5483 W Colonial Drive, Orlando, FL 32808", 28.5558, -81.4456),
    ("7600 Dr Phillips Blvd, Orlando, FL 32819", 28.4525, -81.4856),
    ("4012 Central Florida Pkwy, Orlando, FL 32837", 28.3925, -81.4625),
    ("1800 N Alafaya Trail, Orlando, FL 32826", 28.5825, -81.2056),
]

SALES = [
    (
        "Huge Moving Sale - Everything Must Go!",
        "Selling everything before our big move.",
        [
            ("Leather Sofa", "Brown leather 3-seater", "150.00", "Furniture", "good"),
            ("Coffee Table", "Modern glass top", "45.00", "Furniture", "excellent"),
            ("HP Laptop", "15 inch, works great", "200.00", "Electronics", "good"),
            ("Bookshelf", "Wooden 5-shelf unit", "35.00", "Furniture", "fair"),
        ],
    ),
    (
        "Estate Sale - Antiques and Collectibles",
        "Vintage items and quality furniture.",
        [
            ("Vintage Dresser", "Oak 6-drawer dresser", "180.00", "Furniture", "good"),
            ("Tool Set", "Complete mechanics tool set", "75.00", "Tools", "excellent"),
            ("Kitchen Aid Mixer", "Red stand mixer", "125.00", "Kitchen", "excellent"),
        ],
    ),
    (
        "Kids Toys and Clothing Sale",
        "Gently used toys, games and clothing for kids.",
        [
            ("LEGO Sets", "Various complete sets", "40.00", "Toys", "excellent"),
            ("Kids Bike", "16 inch with training wheels", "45.00", "Sports & Outdoors", "good"),
            ("Board Games", "Monopoly, Scrabble, more", "15.00", "Toys", "good"),
        ],
    ),
    (
        "Tech and Electronics Garage Sale",
        "Upgrading our home, selling electronics and gadgets.",
        [
            ("Samsung Smart TV", "42 inch LED", "250.00", "Electronics", "excellent"),
            ("Bluetooth Speaker", "JBL Charge 4", "60.00", "Electronics", "good"),
            ("Gaming Chair", "Ergonomic with lumbar support", "85.00", "Furniture", "good"),
        ],
    ),
    (
        "Books and Kitchen Items Sale",
        "Downsizing, tons of books and kitchen supplies.",
        [
            ("Classic Novels Bundle", "20+ hardcover classics", "35.00", "Books", "good"),
            ("Pots and Pans Set", "Stainless steel 10-piece", "55.00", "Kitchen", "good"),
        ],
    ),
]


def placeholder(text: str) -> str:
    return f"https://placehold.co/400x400?text={text.replace(' ', '+')}"


async def seed_listings():
    async with async_session() as session:
        sellers = (await session.execute(select(User))).scalars().all()
        if not sellers:
            logger.error("No users found, run the user seeder first")
            return
        categories = {
            category.name: category.id
            for category in (await session.execute(select(Category))).scalars().all()
        }

        created = 0
        for (title, description, items), (location, lat, lng) in zip(SALES, ADDRESSES):
            result = await session.execute(select(Listing).where(Listing.title == title))
            if result.scalar_one_or_none():
                logger.info("Listing %r already exists, skipping", title)
                continue

            listing = Listing(
                seller_id=random.choice(sellers).id,
                title=title,
                description=description,
                sale_date=date.today() + timedelta(days=random.randint(1, 14)),
                start_time=time(8, 0),
                end_time=time(14, 0),
                pickup_notes=fake.sentence(),
                location=location,
                latitude=lat,
                longitude=lng,
                category_id=categories.get(items[0][3]),
            )
            session.add(listing)
            await session.flush()
            session.add(
                ListingPhoto(
                    listing_id=listing.id,
                    url=placeholder(title.split(" - ")[0]),
                    is_primary=True,
                )
            )

            for position, (name, details, price, category, condition) in enumerate(items):
                item = Item(
                    listing_id=listing.id,
                    title=name,
                    description=details,
                    price=Decimal(price),
                    condition=ItemCondition(condition),
                    category_id=categories.get(category),
                    display_order=position,
                )
                session.add(item)
                await session.flush()
                session.add(ItemPhoto(item_id=item.id, url=placeholder(name), is_primary=True))
            created += 1

        await session.commit()
        logger.info("Seeded %d listings", created)


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_listings())
