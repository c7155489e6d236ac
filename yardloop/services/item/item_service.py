import logging

from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from yardloop.api.dependencies import get_async_session
from yardloop.models.favorite_model import ItemFavorite
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.models.photo_model import ItemPhoto
from yardloop.schemas.item_schema import ItemCreate, ItemRead, ItemSearchResult, ItemUpdate
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import EntityNotFound, NotAuthorized
from yardloop.services.geo.engine import ITEM_AGGREGATES
from yardloop.services.geo.projection import project_item, project_item_with_sale
from yardloop.services.listing.listing_service import (
    add_item,
    build_photos,
    ensure_category,
)

logger = logging.getLogger(__name__)


class ItemService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _load_item(self, item_id: int) -> Item:
        result = await self.session.execute(
            select(Item)
            .options(*ITEM_AGGREGATES)
            .where(Item.id == item_id)
            .execution_options(populate_existing=True)
        )
        item = result.scalars().one_or_none()
        if item is None:
            raise EntityNotFound(f"Item with ID {item_id} not found.")
        return item

    async def _check_owner(self, ctx: RequestContext, listing_id: int, action: str):
        user_id = ctx.require_user(action)
        listing = await self.session.get(Listing, listing_id)
        if listing is None:
            raise EntityNotFound(f"Listing with ID {listing_id} not found.")
        if listing.seller_id != user_id:
            raise NotAuthorized(f"Only the seller can {action}.")
        return listing

    async def get_item(self, item_id: int) -> ItemSearchResult:
        return project_item_with_sale(await self._load_item(item_id))

    async def items_for_listing(self, listing_id: int) -> list[ItemRead]:
        if await self.session.get(Listing, listing_id) is None:
            raise EntityNotFound(f"Listing with ID {listing_id} not found.")
        result = await self.session.execute(
            select(Item)
            .options(selectinload(Item.category), selectinload(Item.photos))
            .where(Item.listing_id == listing_id)
            .order_by(Item.display_order, Item.created_at, Item.id)
        )
        return [project_item(item) for item in result.scalars().all()]

    async def create_item(
        self, ctx: RequestContext, listing_id: int, data: ItemCreate
    ) -> ItemSearchResult:
        await self._check_owner(ctx, listing_id, "add items to this listing")
        await ensure_category(self.session, data.category_id)
        try:
            item = await add_item(self.session, listing_id, data)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Adding item to listing %s failed, rolled back", listing_id)
            raise
        return await self.get_item(item.id)

    async def update_item(
        self, ctx: RequestContext, item_id: int, data: ItemUpdate
    ) -> ItemSearchResult:
        item = await self._load_item(item_id)
        await self._check_owner(ctx, item.listing_id, "edit this item")
        changes = data.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"photos", "primary_index"}
        )
        if "category_id" in changes:
            await ensure_category(self.session, changes["category_id"])

        try:
            for field, value in changes.items():
                setattr(item, field, value)
            self.session.add(item)
            if data.photos is not None:
                await self.session.execute(
                    delete(ItemPhoto).where(ItemPhoto.item_id == item_id)
                )
                self.session.add_all(
                    build_photos(
                        ItemPhoto, {"item_id": item_id}, data.photos, data.primary_index
                    )
                )
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Updating item %s failed, rolled back", item_id)
            raise
        return await self.get_item(item_id)

    async def delete_item(self, ctx: RequestContext, item_id: int) -> None:
        item = await self.session.get(Item, item_id)
        if item is None:
            raise EntityNotFound(f"Item with ID {item_id} not found.")
        await self._check_owner(ctx, item.listing_id, "delete this item")
        try:
            await self.session.execute(
                delete(ItemFavorite).where(ItemFavorite.item_id == item_id)
            )
            await self.session.execute(delete(ItemPhoto).where(ItemPhoto.item_id == item_id))
            await self.session.execute(delete(Item).where(Item.id == item_id))
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Deleting item %s failed, rolled back", item_id)
            raise

    async def get_item_photo(self, item_id: int, photo_id: int) -> ItemPhoto:
        result = await self.session.execute(
            select(ItemPhoto).where(ItemPhoto.id == photo_id, ItemPhoto.item_id == item_id)
        )
        photo = result.scalars().one_or_none()
        if photo is None or photo.data is None:
            raise EntityNotFound(f"Photo with ID {photo_id} not found.")
        return photo

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "ItemService":
        return cls(session)
