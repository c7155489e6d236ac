import pytest
from fastapi import status
from httpx import AsyncClient

from yardloop.tests.conftest import create_category


@pytest.mark.asyncio
async def test_categories_sorted_by_name(session, async_client: AsyncClient):
    await create_category(session, "Toys")
    await create_category(session, "Books")

    response = await async_client.get("/api/categories/")
    assert [c["name"] for c in response.json()] == ["Books", "Toys"]


@pytest.mark.asyncio
async def test_duplicate_category_conflicts(seller_client: AsyncClient):
    first = await seller_client.post("/api/categories/", json={"name": "Vinyl"})
    second = await seller_client.post("/api/categories/", json={"name": " Vinyl "})

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_409_CONFLICT
