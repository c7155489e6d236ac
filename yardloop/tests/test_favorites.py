import logging

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlmodel import func, select

from yardloop.models.check_in_model import CheckIn
from yardloop.models.favorite_model import ItemFavorite, ListingFavorite
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import EntityNotFound, NotAuthenticated
from yardloop.services.favorite.favorite_service import FavoriteService
from yardloop.tests.conftest import create_item, create_listing

FAVORITE_SERVICE_LOGGER = "yardloop.services.favorite.favorite_service"


async def count_rows(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
async def test_add_twice_keeps_one_row(session, seller, buyer, buyer_client: AsyncClient):
    listing = await create_listing(session, seller)

    first = await buyer_client.post(f"/api/favorites/{listing.id}")
    second = await buyer_client.post(f"/api/favorites/{listing.id}")

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["active"] is True
    # both calls return the same stored association
    assert first.json()["user_id"] == buyer.id
    assert first.json()["listing_id"] == listing.id
    assert first.json()["favorited_at"] is not None
    assert second.json()["favorited_at"] == first.json()["favorited_at"]
    assert await count_rows(session, ListingFavorite) == 1


@pytest.mark.asyncio
async def test_add_remove_remove(session, seller, buyer, buyer_client: AsyncClient):
    listing = await create_listing(session, seller)

    await buyer_client.post(f"/api/favorites/{listing.id}")
    first = await buyer_client.delete(f"/api/favorites/{listing.id}")
    second = await buyer_client.delete(f"/api/favorites/{listing.id}")

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_200_OK
    assert second.json() == {
        "message": "Listing was not saved",
        "active": False,
        "user_id": buyer.id,
        "listing_id": listing.id,
        "item_id": None,
        "favorited_at": None,
    }
    assert await count_rows(session, ListingFavorite) == 0


@pytest.mark.asyncio
async def test_favorite_requires_user(session, seller, async_client: AsyncClient):
    listing = await create_listing(session, seller)
    response = await async_client.post(f"/api/favorites/{listing.id}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_favorite_unknown_listing(session_factory, buyer_client: AsyncClient):
    response = await buyer_client.post("/api/favorites/12345")
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_saved_listings_newest_favorite_first(session, seller, buyer_client):
    first = await create_listing(session, seller, title="First", age_minutes=10)
    second = await create_listing(session, seller, title="Second", age_minutes=20)
    await buyer_client.post(f"/api/favorites/{first.id}")
    await buyer_client.post(f"/api/favorites/{second.id}")

    response = await buyer_client.get("/api/favorites/")
    body = response.json()
    assert [r["id"] for r in body] == [second.id, first.id]
    assert all(r["favorited_at"] for r in body)


@pytest.mark.asyncio
async def test_item_favorites(session, seller, buyer_client):
    listing = await create_listing(session, seller, title="Garage sale", location="Elm St")
    item = await create_item(session, listing, title="Record player")

    added = await buyer_client.post(f"/api/favorites/items/{item.id}")
    assert added.status_code == 201
    assert added.json()["item_id"] == item.id
    assert added.json()["listing_id"] is None
    assert (await buyer_client.post(f"/api/favorites/items/{item.id}")).status_code == 200

    response = await buyer_client.get("/api/favorites/items")
    [saved] = response.json()
    assert saved["id"] == item.id
    assert saved["sale_title"] == "Garage sale"
    assert saved["sale_location"] == "Elm St"

    await buyer_client.delete(f"/api/favorites/items/{item.id}")
    await buyer_client.delete(f"/api/favorites/items/{item.id}")
    assert await count_rows(session, ItemFavorite) == 0


@pytest.mark.asyncio
async def test_check_in_toggle(session, seller, buyer, buyer_client):
    listing = await create_listing(session, seller)

    first = await buyer_client.post(f"/api/listings/{listing.id}/checkin")
    second = await buyer_client.post(f"/api/listings/{listing.id}/checkin")
    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["check_in_count"] == 1
    assert second.json()["checked_in_users"][0]["id"] == buyer.id

    removed = await buyer_client.delete(f"/api/listings/{listing.id}/checkin")
    again = await buyer_client.delete(f"/api/listings/{listing.id}/checkin")
    assert removed.json()["check_in_count"] == 0
    assert again.status_code == status.HTTP_200_OK
    assert await count_rows(session, CheckIn) == 0


@pytest.mark.asyncio
async def test_insert_race_returns_existing_row(
    session_factory, session, seller, buyer, caplog
):
    listing = await create_listing(session, seller)
    ctx = RequestContext(user_id=buyer.id, username=buyer.username)

    async with session_factory() as first_session:
        _, created = await FavoriteService(first_session).add_listing_favorite(
            ctx, listing.id
        )
    assert created

    # the second request does not see the row before inserting
    async with session_factory() as second_session:
        service = FavoriteService(second_session)
        real_find = service._find
        lookups = []

        async def stale_find(model, keys):
            lookups.append(keys)
            if len(lookups) == 1:
                return None
            return await real_find(model, keys)

        service._find = stale_find
        with caplog.at_level(logging.DEBUG, logger=FAVORITE_SERVICE_LOGGER):
            favorite, created = await service.add_listing_favorite(ctx, listing.id)

    assert not created
    assert favorite.listing_id == listing.id
    assert len(lookups) == 2
    [record] = [r for r in caplog.records if "already present" in r.getMessage()]
    assert record.levelno == logging.DEBUG
    assert await count_rows(session, ListingFavorite) == 1


@pytest.mark.asyncio
async def test_service_needs_user_and_target(session, seller):
    listing = await create_listing(session, seller)
    service = FavoriteService(session)

    with pytest.raises(NotAuthenticated):
        await service.check_in(RequestContext(), listing.id)
    with pytest.raises(EntityNotFound):
        await service.add_item_favorite(RequestContext(user_id=seller.id), 999)
