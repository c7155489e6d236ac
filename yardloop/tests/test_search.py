import pytest
from fastapi import status
from httpx import AsyncClient

from yardloop.tests.conftest import create_category, create_item, create_listing


@pytest.mark.asyncio
async def test_search_returns_listings_and_items(session, seller, async_client: AsyncClient):
    toys = await create_category(session, "Toys")
    listing = await create_listing(
        session,
        seller,
        title="STAR WARS SALE",
        latitude=28.5383,
        longitude=-81.3792,
    )
    figure = await create_item(session, listing, title="Star Destroyer", category_id=toys.id)
    await create_item(session, listing, title="Old poster")
    await create_item(session, listing, title="Starfish lamp", sold=True)

    response = await async_client.get(
        "/api/search/",
        params={"q": "star", "lat": 28.5383, "lng": -81.3792, "radius_km": 5},
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [r["id"] for r in body["listings"]] == [listing.id]
    assert [r["id"] for r in body["items"]] == [figure.id]
    assert body["items"][0]["category_name"] == "Toys"
    assert body["items"][0]["distance_km"] == 0.0
    assert body["query"] == "star"
    assert body["location"] == {
        "latitude": 28.5383,
        "longitude": -81.3792,
        "radius_km": 5.0,
    }


@pytest.mark.asyncio
async def test_search_by_category_alone(session, seller, async_client: AsyncClient):
    books = await create_category(session, "Books")
    kitchen = await create_category(session, "Kitchen")
    book_sale = await create_listing(session, seller, title="Book sale", category_id=books.id)
    other = await create_listing(session, seller, title="Kitchen sale", category_id=kitchen.id)
    novel = await create_item(session, other, title="Novel", category_id=books.id)
    await create_item(session, other, title="Pan", category_id=kitchen.id)

    response = await async_client.get("/api/search/", params={"category": "Books"})
    body = response.json()
    assert [r["id"] for r in body["listings"]] == [book_sale.id]
    assert [r["id"] for r in body["items"]] == [novel.id]
    assert body["location"] is None


@pytest.mark.asyncio
async def test_item_text_matches_category_name(session, seller, async_client):
    furniture = await create_category(session, "Furniture")
    listing = await create_listing(session, seller)
    chair = await create_item(session, listing, title="Chair", category_id=furniture.id)

    response = await async_client.get("/api/search/", params={"q": "furn"})
    assert [r["id"] for r in response.json()["items"]] == [chair.id]


@pytest.mark.asyncio
async def test_items_of_inactive_sales_are_hidden(session, seller, async_client):
    closed = await create_listing(session, seller, title="Closed", is_active=False)
    await create_item(session, closed, title="Lamp")

    response = await async_client.get("/api/search/", params={"q": "lamp"})
    assert response.json()["items"] == []


@pytest.mark.asyncio
async def test_radius_excludes_items_without_coordinates(session, seller, async_client):
    placed = await create_listing(session, seller, latitude=28.5402, longitude=-81.3816)
    unplaced = await create_listing(session, seller)
    near = await create_item(session, placed, title="Fan")
    await create_item(session, unplaced, title="Fan")

    response = await async_client.get(
        "/api/search/",
        params={"q": "fan", "lat": 28.5383, "lng": -81.3792, "radius_km": 1},
    )
    items = response.json()["items"]
    assert [r["id"] for r in items] == [near.id]
    assert items[0]["distance_km"] == pytest.approx(0.3, abs=0.05)


@pytest.mark.asyncio
async def test_empty_search_lists_everything(session, seller, async_client):
    listing = await create_listing(session, seller)
    await create_item(session, listing)

    response = await async_client.get("/api/search/", params={"q": "  "})
    body = response.json()
    assert len(body["listings"]) == 1
    assert len(body["items"]) == 1
    assert body["query"] is None
