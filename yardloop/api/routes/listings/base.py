from fastapi import APIRouter, Depends, Query, Response, status
from pydantic_extra_types.coordinate import Latitude, Longitude

from yardloop.api.dependencies import get_request_context
from yardloop.api.query_params import listing_criteria, reference_point
from yardloop.core.config import config
from yardloop.schemas.listing_schema import (
    ListingCreate,
    ListingRead,
    ListingUpdate,
    NearbyCount,
)
from yardloop.services.context import RequestContext
from yardloop.services.geo import GeoPoint, GeoQueryEngine, SearchCriteria
from yardloop.services.listing.listing_service import ListingService

router = APIRouter()


@router.get(
    "/",
    response_model=list[ListingRead],
    summary="Browse active listings",
    description="Text search with optional distance filter. Results are ordered "
    "by distance when a reference point is given, newest first otherwise.",
)
async def get_listings(
    *,
    criteria: SearchCriteria = Depends(listing_criteria),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    return await engine.search_listings(criteria)


@router.get(
    "/my-listings",
    response_model=list[ListingRead],
    summary="Get listings of current user",
)
async def get_my_listings(
    *,
    ctx: RequestContext = Depends(get_request_context),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    seller_id = ctx.require_user("see your listings")
    return await engine.seller_listings(seller_id)


@router.get(
    "/stats/nearby-count",
    response_model=NearbyCount,
    summary="Count active listings around a point",
)
async def get_nearby_count(
    *,
    lat: Latitude,
    lng: Longitude,
    radius_km: float = Query(
        config.nearby_default_radius_km, ge=0, allow_inf_nan=False
    ),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    origin = GeoPoint(float(lat), float(lng))
    count = await engine.nearby_count(origin, radius_km)
    return NearbyCount(
        count=count,
        latitude=origin.latitude,
        longitude=origin.longitude,
        radius_km=radius_km,
    )


@router.get(
    "/{listing_id}",
    response_model=ListingRead,
    summary="Get listing detail",
)
async def get_listing(
    *,
    listing_id: int,
    origin: GeoPoint | None = Depends(reference_point),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    return await engine.get_listing(listing_id, origin)


@router.get(
    "/{listing_id}/photos/{photo_id}",
    response_class=Response,
    summary="Get stored listing photo",
)
async def get_listing_photo(
    *,
    listing_id: int,
    photo_id: int,
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    photo = await listing_service.get_listing_photo(listing_id, photo_id)
    return Response(
        content=photo.data, media_type=photo.mime_type or "application/octet-stream"
    )


@router.post(
    "/",
    response_model=ListingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new listing",
    description="Creates a listing with photo urls and items in one transaction.",
)
async def create_listing(
    *,
    new_listing_data: ListingCreate,
    ctx: RequestContext = Depends(get_request_context),
    listing_service: ListingService = Depends(ListingService.get_dependency),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    listing_id = await listing_service.create_listing(ctx, new_listing_data)
    return await engine.get_listing(listing_id)


@router.patch(
    "/{listing_id}",
    response_model=ListingRead,
    summary="Update listing",
    description="Owner only. Supplying photos replaces the whole photo set.",
)
async def update_listing(
    *,
    listing_id: int,
    update_data: ListingUpdate,
    ctx: RequestContext = Depends(get_request_context),
    listing_service: ListingService = Depends(ListingService.get_dependency),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    await listing_service.update_listing(ctx, listing_id, update_data)
    return await engine.get_listing(listing_id)


@router.delete(
    "/{listing_id}",
    summary="Delete listing",
)
async def delete_listing(
    *,
    listing_id: int,
    ctx: RequestContext = Depends(get_request_context),
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    await listing_service.delete_listing(ctx, listing_id)
    return {"message": "Listing deleted"}
