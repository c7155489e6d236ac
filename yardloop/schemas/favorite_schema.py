from datetime import datetime

from pydantic import BaseModel

from yardloop.schemas.user_schema import CheckedInUser


# state of a user-to-entity association after an add or remove
class ToggleStatus(BaseModel):
    message: str
    active: bool


class FavoriteStatus(ToggleStatus):
    """The favorite row itself, favorited_at is None once removed."""

    user_id: int
    listing_id: int | None = None
    item_id: int | None = None
    favorited_at: datetime | None = None


class CheckInStatus(ToggleStatus):
    listing_id: int
    check_in_count: int
    checked_in_users: list[CheckedInUser] = []
