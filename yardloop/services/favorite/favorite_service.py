import logging
from typing import TypeVar

from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, desc, select

from yardloop.api.dependencies import get_async_session
from yardloop.models.check_in_model import CheckIn
from yardloop.models.favorite_model import ItemFavorite, ListingFavorite
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.schemas.item_schema import SavedItemRead
from yardloop.schemas.listing_schema import SavedListingRead
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import EntityNotFound
from yardloop.services.geo.engine import ITEM_AGGREGATES, LISTING_AGGREGATES
from yardloop.services.geo.projection import project_item_with_sale, project_listing

logger = logging.getLogger(__name__)

Association = TypeVar("Association", ListingFavorite, ItemFavorite, CheckIn)


class FavoriteService:
    """
    Idempotent user-to-entity associations: listing favorites, item
    favorites and check-ins. Adding twice returns the existing row,
    removing something that is not there does nothing.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _require(self, model: type[SQLModel], entity_id: int, label: str) -> None:
        if await self.session.get(model, entity_id) is None:
            raise EntityNotFound(f"{label} with ID {entity_id} not found.")

    async def _find(self, model: type[Association], keys: dict) -> Association | None:
        return await self.session.get(model, keys)

    async def _add(
        self, model: type[Association], keys: dict
    ) -> tuple[Association, bool]:
        existing = await self._find(model, keys)
        if existing is not None:
            return existing, False

        association = model(**keys)
        self.session.add(association)
        try:
            await self.session.commit()
        except IntegrityError:
            # another request inserted the same pair between lookup and insert
            await self.session.rollback()
            existing = await self._find(model, keys)
            if existing is None:
                raise
            logger.debug("%s %s already present, returning it", model.__name__, keys)
            return existing, False

        await self.session.refresh(association)
        return association, True

    async def _remove(self, model: type[Association], keys: dict) -> bool:
        statement = delete(model).where(
            *[getattr(model, column) == value for column, value in keys.items()]
        )
        result = await self.session.execute(statement)
        await self.session.commit()
        return result.rowcount > 0

    # listing favorites

    async def add_listing_favorite(
        self, ctx: RequestContext, listing_id: int
    ) -> tuple[ListingFavorite, bool]:
        user_id = ctx.require_user("favorite a listing")
        await self._require(Listing, listing_id, "Listing")
        return await self._add(
            ListingFavorite, {"user_id": user_id, "listing_id": listing_id}
        )

    async def remove_listing_favorite(self, ctx: RequestContext, listing_id: int) -> bool:
        user_id = ctx.require_user("unfavorite a listing")
        await self._require(Listing, listing_id, "Listing")
        return await self._remove(
            ListingFavorite, {"user_id": user_id, "listing_id": listing_id}
        )

    # item favorites

    async def add_item_favorite(
        self, ctx: RequestContext, item_id: int
    ) -> tuple[ItemFavorite, bool]:
        user_id = ctx.require_user("favorite an item")
        await self._require(Item, item_id, "Item")
        return await self._add(ItemFavorite, {"user_id": user_id, "item_id": item_id})

    async def remove_item_favorite(self, ctx: RequestContext, item_id: int) -> bool:
        user_id = ctx.require_user("unfavorite an item")
        await self._require(Item, item_id, "Item")
        return await self._remove(ItemFavorite, {"user_id": user_id, "item_id": item_id})

    # check-ins

    async def check_in(self, ctx: RequestContext, listing_id: int) -> tuple[CheckIn, bool]:
        user_id = ctx.require_user("check in")
        await self._require(Listing, listing_id, "Listing")
        return await self._add(CheckIn, {"user_id": user_id, "listing_id": listing_id})

    async def check_out(self, ctx: RequestContext, listing_id: int) -> bool:
        user_id = ctx.require_user("check out")
        await self._require(Listing, listing_id, "Listing")
        return await self._remove(CheckIn, {"user_id": user_id, "listing_id": listing_id})

    # saved collections

    async def saved_listings(self, ctx: RequestContext) -> list[SavedListingRead]:
        """Favorited listings of the caller, most recently favorited first."""
        user_id = ctx.require_user("see saved listings")
        result = await self.session.execute(
            select(Listing, ListingFavorite.favorited_at)
            .join(ListingFavorite, ListingFavorite.listing_id == Listing.id)
            .options(*LISTING_AGGREGATES)
            .where(ListingFavorite.user_id == user_id)
            .order_by(desc(ListingFavorite.favorited_at), desc(Listing.id))
        )
        return [
            SavedListingRead(
                **project_listing(listing).model_dump(), favorited_at=favorited_at
            )
            for listing, favorited_at in result.all()
        ]

    async def saved_items(self, ctx: RequestContext) -> list[SavedItemRead]:
        user_id = ctx.require_user("see saved items")
        result = await self.session.execute(
            select(Item, ItemFavorite.favorited_at)
            .join(ItemFavorite, ItemFavorite.item_id == Item.id)
            .options(*ITEM_AGGREGATES)
            .where(ItemFavorite.user_id == user_id)
            .order_by(desc(ItemFavorite.favorited_at), desc(Item.id))
        )
        return [
            SavedItemRead(
                **project_item_with_sale(item).model_dump(), favorited_at=favorited_at
            )
            for item, favorited_at in result.all()
        ]

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "FavoriteService":
        return cls(session)
