from fastapi import APIRouter, Depends, Response, status

from yardloop.api.dependencies import get_request_context
from yardloop.models.favorite_model import ItemFavorite, ListingFavorite
from yardloop.schemas.favorite_schema import FavoriteStatus
from yardloop.schemas.item_schema import SavedItemRead
from yardloop.schemas.listing_schema import SavedListingRead
from yardloop.services.context import RequestContext
from yardloop.services.favorite.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["Favorites"])


def added(
    response: Response,
    favorite: ListingFavorite | ItemFavorite,
    created: bool,
    label: str,
) -> FavoriteStatus:
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    message = f"{label} saved" if created else f"{label} already saved"
    return FavoriteStatus(message=message, active=True, **favorite.model_dump())


def removed(deleted: bool, label: str, **keys: int) -> FavoriteStatus:
    message = f"{label} removed from favorites" if deleted else f"{label} was not saved"
    return FavoriteStatus(message=message, active=False, **keys)


@router.get(
    "/",
    response_model=list[SavedListingRead],
    summary="Get favorite listings of current user",
)
async def get_favorite_listings(
    *,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    return await favorite_service.saved_listings(ctx)


@router.get(
    "/items",
    response_model=list[SavedItemRead],
    summary="Get favorite items of current user",
)
async def get_favorite_items(
    *,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    return await favorite_service.saved_items(ctx)


@router.post("/items/{item_id}", response_model=FavoriteStatus, summary="Save an item")
async def add_favorite_item(
    *,
    item_id: int,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    favorite, created = await favorite_service.add_item_favorite(ctx, item_id)
    return added(response, favorite, created, "Item")


@router.delete("/items/{item_id}", response_model=FavoriteStatus, summary="Unsave an item")
async def remove_favorite_item(
    *,
    item_id: int,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    deleted = await favorite_service.remove_item_favorite(ctx, item_id)
    return removed(deleted, "Item", user_id=ctx.user_id, item_id=item_id)


@router.post(
    "/{listing_id}", response_model=FavoriteStatus, summary="Save a listing"
)
async def add_favorite_listing(
    *,
    listing_id: int,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    favorite, created = await favorite_service.add_listing_favorite(ctx, listing_id)
    return added(response, favorite, created, "Listing")


@router.delete(
    "/{listing_id}", response_model=FavoriteStatus, summary="Unsave a listing"
)
async def remove_favorite_listing(
    *,
    listing_id: int,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
):
    deleted = await favorite_service.remove_listing_favorite(ctx, listing_id)
    return removed(deleted, "Listing", user_id=ctx.user_id, listing_id=listing_id)
