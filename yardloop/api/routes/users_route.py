from fastapi import APIRouter, Depends

from yardloop.api.dependencies import get_request_context
from yardloop.schemas.user_schema import ProfileRead, ProfileUpdate, PublicProfile
from yardloop.services.context import RequestContext
from yardloop.services.user.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=ProfileRead, summary="Get own profile")
async def get_profile(
    *,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(UserService.get_dependency),
):
    return await user_service.get_profile(ctx)


@router.put("/profile", response_model=ProfileRead, summary="Update own profile")
async def update_profile(
    *,
    profile_data: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(UserService.get_dependency),
):
    return await user_service.update_profile(ctx, profile_data)


@router.get(
    "/{username}",
    response_model=PublicProfile,
    summary="Get public profile",
    description="Public view of a user, the phone number is never included.",
)
async def get_public_profile(
    *,
    username: str,
    user_service: UserService = Depends(UserService.get_dependency),
):
    return await user_service.public_profile(username)
