import os

os.environ["TESTING"] = "1"

from datetime import timedelta
from decimal import Decimal

import pytest_asyncio
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from yardloop.api.dependencies import get_async_session, get_user
from yardloop.api.main import app
from yardloop.models.category_model import Category
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.models.timestamps import utc_now
from yardloop.models.user_model import User
from yardloop.schemas.enums import ItemCondition

DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# the auth middleware skips verification while TESTING is set,
# the identity is taken from this header instead
TEST_UID_HEADER = "X-Test-Uid"


async def override_get_user(request: Request) -> dict | None:
    uid = request.headers.get(TEST_UID_HEADER)
    return {"uid": uid} if uid else None


@pytest_asyncio.fixture()
async def session_factory():
    engine = create_async_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        # ensure that we are connecting to the same
        # in memory database
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_async_session() -> AsyncSession:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_user] = override_get_user
    yield factory
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture()
async def session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


def client_for(user: User | None = None) -> AsyncClient:
    headers = {}
    if user is not None:
        headers = {"Authorization": "Bearer fake", TEST_UID_HEADER: user.firebase_uid}
    return AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test", headers=headers
    )


async def create_user(session: AsyncSession, username: str) -> User:
    user = User(firebase_uid=f"uid-{username}", username=username)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_category(session: AsyncSession, name: str) -> Category:
    category = Category(name=name)
    session.add(category)
    await session.commit()
    await session.refresh(category)
    return category


async def create_listing(
    session: AsyncSession, seller: User, age_minutes: int = 0, **fields
) -> Listing:
    """Insert a listing directly, age_minutes shifts created_at into the past."""
    fields.setdefault("title", "Yard Sale")
    listing = Listing(
        seller_id=seller.id,
        created_at=utc_now() - timedelta(minutes=age_minutes),
        **fields,
    )
    session.add(listing)
    await session.commit()
    await session.refresh(listing)
    return listing


async def create_item(session: AsyncSession, listing: Listing, **fields) -> Item:
    fields.setdefault("title", "Lamp")
    fields.setdefault("price", Decimal("5.00"))
    fields.setdefault("condition", ItemCondition.GOOD)
    item = Item(listing_id=listing.id, **fields)
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return item


@pytest_asyncio.fixture()
async def seller(session) -> User:
    return await create_user(session, "seller")


@pytest_asyncio.fixture()
async def buyer(session) -> User:
    return await create_user(session, "buyer")


@pytest_asyncio.fixture()
async def async_client(session_factory) -> AsyncClient:
    async with client_for() as client:
        yield client


@pytest_asyncio.fixture()
async def seller_client(seller) -> AsyncClient:
    async with client_for(seller) as client:
        yield client


@pytest_asyncio.fixture()
async def buyer_client(buyer) -> AsyncClient:
    async with client_for(buyer) as client:
        yield client
