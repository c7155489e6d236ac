from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlmodel import select

from yardloop.api.dependencies import get_async_session, get_request_context
from yardloop.models.category_model import Category
from yardloop.schemas.category_schema import CategoryCreate, CategoryRead
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import Conflict

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("/", response_model=list[CategoryRead])
async def get_categories(
    *,
    session: AsyncSession = Depends(get_async_session),
):
    response = await session.execute(select(Category).order_by(Category.name))
    return response.scalars().all()


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    category_data: CategoryCreate,
    session: AsyncSession = Depends(get_async_session),
    ctx: RequestContext = Depends(get_request_context),
):
    ctx.require_user("create categories")
    category = Category(name=category_data.name)
    session.add(category)
    try:
        await session.commit()
    except IntegrityError:
        # unlike favorites a second category with the same name is an error
        await session.rollback()
        raise Conflict(f"Category {category_data.name} already exists.")
    await session.refresh(category)
    return category
