from fastapi import APIRouter, Depends
from pydantic import BaseModel

from yardloop.api.query_params import search_criteria
from yardloop.schemas.item_schema import ItemSearchResult
from yardloop.schemas.listing_schema import ListingRead
from yardloop.services.geo import GeoQueryEngine, SearchCriteria

router = APIRouter(prefix="/search", tags=["Search"])


class SearchLocation(BaseModel):
    latitude: float
    longitude: float
    radius_km: float | None = None


class SearchResponse(BaseModel):
    listings: list[ListingRead]
    items: list[ItemSearchResult]
    query: str | None = None
    category: str | None = None
    location: SearchLocation | None = None


@router.get(
    "/",
    response_model=SearchResponse,
    summary="Search listings and items",
    description="Runs the listing and the item search with the same criteria.",
)
async def search(
    *,
    criteria: SearchCriteria = Depends(search_criteria),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    listings = await engine.search_listings(criteria)
    items = await engine.search_items(criteria)

    location = None
    if criteria.location_active:
        location = SearchLocation(
            latitude=criteria.origin.latitude,
            longitude=criteria.origin.longitude,
            radius_km=criteria.radius_km,
        )
    return SearchResponse(
        listings=listings,
        items=items,
        query=criteria.query,
        category=criteria.category,
        location=location,
    )
