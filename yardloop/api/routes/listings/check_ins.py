from fastapi import APIRouter, Depends, Response, status

from yardloop.api.dependencies import get_request_context
from yardloop.schemas.favorite_schema import CheckInStatus
from yardloop.services.context import RequestContext
from yardloop.services.favorite.favorite_service import FavoriteService
from yardloop.services.geo import GeoQueryEngine

router = APIRouter()


async def check_in_status(
    engine: GeoQueryEngine, listing_id: int, message: str, active: bool
) -> CheckInStatus:
    listing = await engine.get_listing(listing_id)
    return CheckInStatus(
        message=message,
        active=active,
        listing_id=listing_id,
        check_in_count=listing.check_in_count,
        checked_in_users=listing.checked_in_users,
    )


@router.post(
    "/{listing_id}/checkin",
    response_model=CheckInStatus,
    responses={status.HTTP_201_CREATED: {"model": CheckInStatus}},
    summary="Check in to a sale",
    description="Idempotent, returns 201 on the first check-in and 200 afterwards.",
)
async def check_in(
    *,
    listing_id: int,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    _, created = await favorite_service.check_in(ctx, listing_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return await check_in_status(
        engine, listing_id, "Checked in" if created else "Already checked in", True
    )


@router.delete(
    "/{listing_id}/checkin",
    response_model=CheckInStatus,
    summary="Undo a check-in",
)
async def check_out(
    *,
    listing_id: int,
    ctx: RequestContext = Depends(get_request_context),
    favorite_service: FavoriteService = Depends(FavoriteService.get_dependency),
    engine: GeoQueryEngine = Depends(GeoQueryEngine.get_dependency),
):
    removed = await favorite_service.check_out(ctx, listing_id)
    return await check_in_status(
        engine, listing_id, "Check-in removed" if removed else "Not checked in", False
    )
