import logging

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from yardloop.api.dependencies import get_async_session
from yardloop.models.listing_model import Listing
from yardloop.models.user_model import User
from yardloop.schemas.user_schema import (
    ProfileRead,
    ProfileUpdate,
    PublicProfile,
    RegisterUserRequest,
)
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import Conflict, EntityNotFound, NotAuthenticated

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_by_uid(self, firebase_uid: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.firebase_uid == firebase_uid)
        )
        return result.scalars().one_or_none()

    async def get_user_by_id(self, user_id: int) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise EntityNotFound(f"User with ID {user_id} not found.")
        return user

    async def register(
        self, identity: dict | None, data: RegisterUserRequest
    ) -> tuple[User, bool]:
        """
        Create the local account of a verified identity.

        :return: the user and whether it was created; an identity that is
            already registered gets its existing account back.
        :raises Conflict: if the username belongs to someone else.
        """
        if not identity or not identity.get("uid"):
            raise NotAuthenticated("Must be logged in to register.")

        existing = await self.get_user_by_uid(identity["uid"])
        if existing is not None:
            return existing, False

        taken = await self.session.execute(
            select(User.id).where(User.username == data.username)
        )
        if taken.first() is not None:
            raise Conflict(f"Username {data.username} is already taken.")

        user = User(firebase_uid=identity["uid"], **data.model_dump())
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict(f"Username {data.username} is already taken.")
        await self.session.refresh(user)
        logger.info("Registered user %s (%s)", user.id, user.username)
        return user, True

    async def get_profile(self, ctx: RequestContext) -> ProfileRead:
        user = await self.get_user_by_id(ctx.require_user("view your profile"))
        return ProfileRead.model_validate(user)

    async def update_profile(self, ctx: RequestContext, data: ProfileUpdate) -> ProfileRead:
        user = await self.get_user_by_id(ctx.require_user("edit your profile"))
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return ProfileRead.model_validate(user)

    async def public_profile(self, username: str) -> PublicProfile:
        result = await self.session.execute(select(User).where(User.username == username))
        user = result.scalars().one_or_none()
        if user is None:
            raise EntityNotFound(f"User {username} not found.")

        listing_count = await self.session.scalar(
            select(func.count(Listing.id)).where(
                Listing.seller_id == user.id,
                Listing.is_active == True,  # noqa: E712
            )
        )
        return PublicProfile(
            id=user.id,
            username=user.username,
            avatarurl=user.avatarurl,
            created_at=user.created_at,
            bio=user.bio,
            preferred_contact=user.preferred_contact,
            listing_count=listing_count or 0,
        )

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "UserService":
        return cls(session)
