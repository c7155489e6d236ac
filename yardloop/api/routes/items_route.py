from fastapi import APIRouter, Depends, Query, Response, status

from yardloop.api.dependencies import get_request_context
from yardloop.schemas.item_schema import ItemCreate, ItemRead, ItemSearchResult, ItemUpdate
from yardloop.services.context import RequestContext
from yardloop.services.geo import GeoQueryEngine, SearchCriteria
from yardloop.services.item.item_service import ItemService

router = APIRouter(prefix="/items", tags=["Items"])


@router.get(
    "/",
    response_model=list[ItemSearchResult],
    summary="Browse items for sale",
    description="Unsold items of active sales, newest first.",
)
async def get_items(
    *,
    category: str | None = Query(None, description="Exact category name."),
    search: str | None = Query(None, description="Case insensitive text filter."),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    return await engine.search_items(SearchCriteria(query=search, category=category))


@router.get(
    "/listings/{listing_id}",
    response_model=list[ItemRead],
    summary="Get items of a listing",
)
async def get_listing_items(
    *,
    listing_id: int,
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    return await item_service.items_for_listing(listing_id)


@router.post(
    "/listings/{listing_id}",
    response_model=ItemSearchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Add an item to a listing",
)
async def create_item(
    *,
    listing_id: int,
    new_item_data: ItemCreate,
    ctx: RequestContext = Depends(get_request_context),
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    return await item_service.create_item(ctx, listing_id, new_item_data)


@router.get("/{item_id}", response_model=ItemSearchResult, summary="Get item detail")
async def get_item(
    *,
    item_id: int,
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    return await item_service.get_item(item_id)


@router.get(
    "/{item_id}/photos/{photo_id}",
    response_class=Response,
    summary="Get stored item photo",
)
async def get_item_photo(
    *,
    item_id: int,
    photo_id: int,
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    photo = await item_service.get_item_photo(item_id, photo_id)
    return Response(
        content=photo.data, media_type=photo.mime_type or "application/octet-stream"
    )


@router.patch("/{item_id}", response_model=ItemSearchResult, summary="Update item")
async def update_item(
    *,
    item_id: int,
    update_data: ItemUpdate,
    ctx: RequestContext = Depends(get_request_context),
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    return await item_service.update_item(ctx, item_id, update_data)


@router.delete("/{item_id}", summary="Delete item")
async def delete_item(
    *,
    item_id: int,
    ctx: RequestContext = Depends(get_request_context),
    item_service: ItemService = Depends(ItemService.get_dependency),
):
    await item_service.delete_item(ctx, item_id)
    return {"message": "Item deleted"}
