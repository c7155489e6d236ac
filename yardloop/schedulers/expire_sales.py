import logging
from datetime import date

from sqlalchemy import update

from yardloop.db.database import async_session
from yardloop.models.listing_model import Listing

logger = logging.getLogger(__name__)


async def deactivate_past_sales(today: date | None = None) -> int:
    """Close active listings whose sale date is already over."""
    today = today or date.today()
    async with async_session() as session:
        result = await session.execute(
            update(Listing)
            .where(
                Listing.is_active == True,  # noqa: E712
                Listing.sale_date.is_not(None),
                Listing.sale_date < today,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        await session.commit()

    if result.rowcount:
        logger.info("Deactivated %d past sales", result.rowcount)
    return result.rowcount
