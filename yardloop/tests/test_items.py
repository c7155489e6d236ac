import pytest
from fastapi import status
from httpx import AsyncClient

from yardloop.models.photo_model import ItemPhoto
from yardloop.tests.conftest import create_category, create_item, create_listing


@pytest.mark.asyncio
async def test_browse_items_newest_first(session, seller, async_client: AsyncClient):
    tools = await create_category(session, "Tools")
    listing = await create_listing(session, seller, title="Workshop clearout")
    drill = await create_item(session, listing, title="Drill", category_id=tools.id)
    saw = await create_item(session, listing, title="Saw", category_id=tools.id)
    await create_item(session, listing, title="Rug")

    response = await async_client.get("/api/items/", params={"category": "Tools"})
    assert response.status_code == status.HTTP_200_OK
    assert [r["id"] for r in response.json()] == [saw.id, drill.id]

    response = await async_client.get("/api/items/", params={"search": "DRILL"})
    [found] = response.json()
    assert found["id"] == drill.id
    assert found["sale_title"] == "Workshop clearout"


@pytest.mark.asyncio
async def test_items_of_listing_in_display_order(session, seller, async_client):
    listing = await create_listing(session, seller)
    second = await create_item(session, listing, title="B", display_order=2)
    first = await create_item(session, listing, title="A", display_order=1)

    response = await async_client.get(f"/api/items/listings/{listing.id}")
    assert [r["id"] for r in response.json()] == [first.id, second.id]

    response = await async_client.get("/api/items/listings/999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_seller_adds_item(session, seller, seller_client):
    listing = await create_listing(session, seller, title="Porch sale")

    response = await seller_client.post(
        f"/api/items/listings/{listing.id}",
        json={
            "title": "Rocking chair",
            "price": "35.50",
            "condition": "excellent",
            "photos": ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
            "primary_index": 1,
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["sale_title"] == "Porch sale"
    assert body["price"] == "35.50"
    assert body["photos"][0]["url"] == "https://cdn.example.com/b.jpg"
    assert body["photos"][0]["is_primary"] is True


@pytest.mark.asyncio
async def test_only_seller_manages_items(session, seller, buyer_client):
    listing = await create_listing(session, seller)
    item = await create_item(session, listing)

    response = await buyer_client.post(
        f"/api/items/listings/{listing.id}",
        json={"title": "Sneaky", "price": "1", "condition": "poor"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    response = await buyer_client.patch(f"/api/items/{item.id}", json={"sold": True})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    response = await buyer_client.delete(f"/api/items/{item.id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_sold_items_leave_the_count(session, seller, seller_client):
    listing = await create_listing(session, seller)
    item = await create_item(session, listing)
    await create_item(session, listing, title="Mirror")

    response = await seller_client.patch(f"/api/items/{item.id}", json={"sold": True})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["sold"] is True

    detail = await seller_client.get(f"/api/listings/{listing.id}")
    assert detail.json()["item_count"] == 1


@pytest.mark.asyncio
async def test_delete_item(session, seller, seller_client):
    listing = await create_listing(session, seller)
    item = await create_item(session, listing)
    session.add(ItemPhoto(item_id=item.id, url="https://cdn.example.com/x.jpg"))
    await session.commit()

    response = await seller_client.delete(f"/api/items/{item.id}")
    assert response.status_code == status.HTTP_200_OK
    response = await seller_client.get(f"/api/items/{item.id}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
