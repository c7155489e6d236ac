from fastapi import APIRouter

from .base import router as crud_router
from .check_ins import router as check_ins_router

router = APIRouter(prefix="/listings", tags=["Listings"])
router.include_router(
    crud_router,
)
router.include_router(
    check_ins_router,
)
