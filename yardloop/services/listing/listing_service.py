import logging

from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from yardloop.api.dependencies import get_async_session
from yardloop.models.category_model import Category
from yardloop.models.check_in_model import CheckIn
from yardloop.models.conversation_model import Conversation, Message
from yardloop.models.favorite_model import ItemFavorite, ListingFavorite
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.models.photo_model import ItemPhoto, ListingPhoto
from yardloop.schemas.item_schema import ItemCreate
from yardloop.schemas.listing_schema import ListingCreate, ListingUpdate
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import EntityNotFound, NotAuthorized

logger = logging.getLogger(__name__)


def build_photos(model, owner: dict, urls: list[str], primary_index: int) -> list:
    """Photo rows in upload order, the one at primary_index marked primary."""
    return [
        model(**owner, url=url, position=position, is_primary=position == primary_index)
        for position, url in enumerate(urls)
    ]


async def ensure_category(session: AsyncSession, category_id: int | None) -> None:
    if category_id is not None and await session.get(Category, category_id) is None:
        raise EntityNotFound(f"Category with ID {category_id} not found.")


async def add_item(
    session: AsyncSession, listing_id: int, data: ItemCreate, position: int = 0
) -> Item:
    """Stage an item and its photos, the caller owns the transaction."""
    fields = data.model_dump(exclude={"photos", "primary_index"})
    fields["display_order"] = data.display_order or position
    item = Item(listing_id=listing_id, **fields)
    session.add(item)
    await session.flush()
    session.add_all(
        build_photos(ItemPhoto, {"item_id": item.id}, data.photos, data.primary_index)
    )
    return item


class ListingService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_owned_listing(
        self, ctx: RequestContext, listing_id: int, action: str
    ) -> Listing:
        user_id = ctx.require_user(action)
        listing = await self.session.get(Listing, listing_id)
        if listing is None:
            raise EntityNotFound(f"Listing with ID {listing_id} not found.")
        if listing.seller_id != user_id:
            raise NotAuthorized(f"Only the seller can {action}.")
        return listing

    async def create_listing(self, ctx: RequestContext, data: ListingCreate) -> int:
        """
        Create a listing with its photos and items in one transaction.

        :param ctx: caller, becomes the seller.
        :param data: validated listing payload.
        :return: ID of the new listing.
        :raises EntityNotFound: if a referenced category does not exist.
        """
        seller_id = ctx.require_user("create a listing")
        await ensure_category(self.session, data.category_id)
        for item_data in data.items:
            await ensure_category(self.session, item_data.category_id)

        listing = Listing(
            seller_id=seller_id,
            **data.model_dump(exclude={"photos", "primary_index", "items"}),
        )
        try:
            self.session.add(listing)
            await self.session.flush()
            self.session.add_all(
                build_photos(
                    ListingPhoto,
                    {"listing_id": listing.id},
                    data.photos,
                    data.primary_index,
                )
            )
            for position, item_data in enumerate(data.items):
                await add_item(self.session, listing.id, item_data, position)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Creating listing for seller %s failed, rolled back", seller_id)
            raise

        logger.info(
            "Listing %s created by seller %s with %d photos and %d items",
            listing.id,
            seller_id,
            len(data.photos),
            len(data.items),
        )
        return listing.id

    async def update_listing(
        self, ctx: RequestContext, listing_id: int, data: ListingUpdate
    ) -> int:
        listing = await self.get_owned_listing(ctx, listing_id, "edit this listing")
        # omitted or null fields keep their stored value
        changes = data.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"photos", "primary_index"}
        )
        if "category_id" in changes:
            await ensure_category(self.session, changes["category_id"])

        try:
            for field, value in changes.items():
                setattr(listing, field, value)
            self.session.add(listing)
            if data.photos is not None:
                await self.session.execute(
                    delete(ListingPhoto).where(ListingPhoto.listing_id == listing_id)
                )
                self.session.add_all(
                    build_photos(
                        ListingPhoto,
                        {"listing_id": listing_id},
                        data.photos,
                        data.primary_index,
                    )
                )
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Updating listing %s failed, rolled back", listing_id)
            raise
        return listing_id

    async def delete_listing(self, ctx: RequestContext, listing_id: int) -> None:
        """Hard delete of a listing and everything hanging off it."""
        await self.get_owned_listing(ctx, listing_id, "delete this listing")

        item_ids = select(Item.id).where(Item.listing_id == listing_id)
        conversation_ids = select(Conversation.id).where(
            Conversation.listing_id == listing_id
        )
        statements = [
            delete(Message).where(Message.conversation_id.in_(conversation_ids)),
            delete(Conversation).where(Conversation.listing_id == listing_id),
            delete(ItemFavorite).where(ItemFavorite.item_id.in_(item_ids)),
            delete(ItemPhoto).where(ItemPhoto.item_id.in_(item_ids)),
            delete(Item).where(Item.listing_id == listing_id),
            delete(ListingFavorite).where(ListingFavorite.listing_id == listing_id),
            delete(CheckIn).where(CheckIn.listing_id == listing_id),
            delete(ListingPhoto).where(ListingPhoto.listing_id == listing_id),
            delete(Listing).where(Listing.id == listing_id),
        ]
        try:
            for statement in statements:
                await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Deleting listing %s failed, rolled back", listing_id)
            raise
        logger.info("Listing %s deleted", listing_id)

    async def get_listing_photo(self, listing_id: int, photo_id: int) -> ListingPhoto:
        result = await self.session.execute(
            select(ListingPhoto).where(
                ListingPhoto.id == photo_id, ListingPhoto.listing_id == listing_id
            )
        )
        photo = result.scalars().one_or_none()
        if photo is None or photo.data is None:
            raise EntityNotFound(f"Photo with ID {photo_id} not found.")
        return photo

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "ListingService":
        return cls(session)
