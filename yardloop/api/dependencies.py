from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlmodel import select

from yardloop.db.database import async_session
from yardloop.models.user_model import User
from yardloop.services.context import ANONYMOUS, RequestContext


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session


async def get_user(request: Request) -> dict | None:
    # set by the authentication middleware, None for anonymous requests
    return getattr(request.state, "user", None)


async def get_request_context(
    session: AsyncSession = Depends(get_async_session),
    identity: dict | None = Depends(get_user),
) -> RequestContext:
    """
    Resolve the verified identity to a local user. An identity without a
    registered user is treated as anonymous until it registers.
    """
    if not identity or not identity.get("uid"):
        return ANONYMOUS

    result = await session.execute(
        select(User.id, User.username).where(User.firebase_uid == identity["uid"])
    )
    row = result.one_or_none()
    if row is None:
        return ANONYMOUS
    return RequestContext(user_id=row.id, username=row.username)
