from fastapi import APIRouter, Depends, Response, status

from yardloop.api.dependencies import get_request_context, get_user
from yardloop.schemas.user_schema import RegisterUserRequest, UserRead
from yardloop.services.context import RequestContext
from yardloop.services.user.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserRead,
    responses={status.HTTP_201_CREATED: {"model": UserRead}},
    summary="Register the verified identity as a user",
)
async def register_user(
    *,
    register_form: RegisterUserRequest,
    response: Response,
    identity: dict | None = Depends(get_user),
    user_service: UserService = Depends(UserService.get_dependency),
):
    user, created = await user_service.register(identity, register_form)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return user


@router.get("/me", response_model=UserRead | None, summary="Get current user")
async def get_me(
    *,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(UserService.get_dependency),
):
    if not ctx.is_authenticated:
        return None
    return await user_service.get_user_by_id(ctx.user_id)
