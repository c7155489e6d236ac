import logging
from typing import Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import desc, select

from yardloop.api.dependencies import get_async_session
from yardloop.models.check_in_model import CheckIn
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.schemas.item_schema import ItemSearchResult
from yardloop.schemas.listing_schema import ListingRead
from yardloop.services.exceptions import EntityNotFound

from .criteria import GeoPoint, SearchCriteria
from .distance import bounding_box, distance_from
from .filters import (
    coordinates_clause,
    item_category_clause,
    item_text_clause,
    listing_category_clause,
    listing_text_clause,
    within_radius,
)
from .projection import project_item_with_sale, project_listing
from .ranking import rank_results

logger = logging.getLogger(__name__)

# everything project_listing reads, loaded in a fixed number of queries
LISTING_AGGREGATES = (
    selectinload(Listing.seller),
    selectinload(Listing.category),
    selectinload(Listing.photos),
    selectinload(Listing.items).selectinload(Item.category),
    selectinload(Listing.check_ins).selectinload(CheckIn.user),
)

ITEM_AGGREGATES = (
    selectinload(Item.listing),
    selectinload(Item.category),
    selectinload(Item.photos),
)


class GeoQueryEngine:
    """
    Geospatial search over listings and items.

    SQL narrows the candidate rows (active flag, text, category and a
    bounding box around the reference point). Exact distance, radius
    check, ranking and the nested result shape are computed here.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # query construction

    def listing_query(self, criteria: SearchCriteria):
        query = (
            select(Listing)
            .options(*LISTING_AGGREGATES)
            .where(Listing.is_active == True)  # noqa: E712
        )
        if criteria.query is not None:
            query = query.where(listing_text_clause(criteria.query))
        if criteria.category is not None:
            query = query.where(listing_category_clause(criteria.category))
        if criteria.radius_active:
            box = bounding_box(criteria.origin, criteria.radius_km)
            query = query.where(coordinates_clause(box))
        return query

    def item_query(self, criteria: SearchCriteria):
        query = (
            select(Item)
            .join(Listing, Item.listing_id == Listing.id)
            .options(*ITEM_AGGREGATES)
            .where(Item.sold == False, Listing.is_active == True)  # noqa: E712
        )
        if criteria.query is not None:
            query = query.where(item_text_clause(criteria.query))
        if criteria.category is not None:
            query = query.where(item_category_clause(criteria.category))
        if criteria.radius_active:
            box = bounding_box(criteria.origin, criteria.radius_km)
            query = query.where(coordinates_clause(box))
        return query

    # filtering, projection and ranking of loaded rows

    def shape_listings(
        self, listings: Sequence[Listing], criteria: SearchCriteria
    ) -> list[ListingRead]:
        origin = criteria.origin
        results = []
        for listing in listings:
            distance = distance_from(origin, listing.latitude, listing.longitude)
            if criteria.radius_active and not within_radius(
                distance, criteria.radius_km
            ):
                continue
            results.append(project_listing(listing, distance))
        return rank_results(results, criteria.location_active)

    def shape_items(
        self, items: Sequence[Item], criteria: SearchCriteria
    ) -> list[ItemSearchResult]:
        origin = criteria.origin
        results = []
        for item in items:
            distance = distance_from(
                origin, item.listing.latitude, item.listing.longitude
            )
            if criteria.radius_active and not within_radius(
                distance, criteria.radius_km
            ):
                continue
            results.append(project_item_with_sale(item, distance))
        return rank_results(results, criteria.location_active)

    # operations

    async def search_listings(self, criteria: SearchCriteria) -> list[ListingRead]:
        result = await self.session.execute(self.listing_query(criteria))
        listings = result.scalars().all()
        shaped = self.shape_listings(listings, criteria)
        logger.debug(
            "listing search q=%r origin=%s radius=%s: %d candidates, %d results",
            criteria.query,
            criteria.origin,
            criteria.radius_km,
            len(listings),
            len(shaped),
        )
        return shaped

    async def search_items(self, criteria: SearchCriteria) -> list[ItemSearchResult]:
        result = await self.session.execute(self.item_query(criteria))
        items = result.scalars().all()
        return self.shape_items(items, criteria)

    async def get_listing(
        self, listing_id: int, origin: GeoPoint | None = None
    ) -> ListingRead:
        result = await self.session.execute(
            select(Listing)
            .options(*LISTING_AGGREGATES)
            .where(Listing.id == listing_id)
            .execution_options(populate_existing=True)
        )
        listing = result.scalars().one_or_none()
        if listing is None:
            raise EntityNotFound(f"Listing with ID {listing_id} not found.")
        return project_listing(
            listing, distance_from(origin, listing.latitude, listing.longitude)
        )

    async def seller_listings(self, seller_id: int) -> list[ListingRead]:
        """All listings of a seller, inactive ones included, newest first."""
        result = await self.session.execute(
            select(Listing)
            .options(*LISTING_AGGREGATES)
            .where(Listing.seller_id == seller_id)
            .order_by(desc(Listing.created_at), desc(Listing.id))
        )
        return [project_listing(listing) for listing in result.scalars().all()]

    async def nearby_count(self, origin: GeoPoint, radius_km: float) -> int:
        box = bounding_box(origin, radius_km)
        result = await self.session.execute(
            select(Listing.latitude, Listing.longitude).where(
                Listing.is_active == True,  # noqa: E712
                coordinates_clause(box),
            )
        )
        return sum(
            1
            for latitude, longitude in result.all()
            if within_radius(distance_from(origin, latitude, longitude), radius_km)
        )

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "GeoQueryEngine":
        return cls(session)
