from datetime import date, timedelta

import pytest
from sqlmodel import select

from yardloop.models.listing_model import Listing
from yardloop.schedulers import expire_sales
from yardloop.tests.conftest import create_listing


@pytest.mark.asyncio
async def test_past_sales_are_deactivated(session_factory, session, seller, monkeypatch):
    monkeypatch.setattr(expire_sales, "async_session", session_factory)
    today = date(2026, 6, 6)
    past = await create_listing(session, seller, sale_date=today - timedelta(days=1))
    upcoming = await create_listing(session, seller, sale_date=today)
    undated = await create_listing(session, seller)

    assert await expire_sales.deactivate_past_sales(today) == 1

    result = await session.execute(
        select(Listing.id, Listing.is_active)
    )
    active = dict(result.all())
    assert active == {past.id: False, upcoming.id: True, undated.id: True}
