from . import (
    auth_route,
    categories_route,
    favorites_route,
    items_route,
    messages_route,
    search_route,
    users_route,
)
from .listings import router as listings_router

__all__ = [
    "auth_route",
    "categories_route",
    "favorites_route",
    "items_route",
    "listings_router",
    "messages_route",
    "search_route",
    "users_route",
]
