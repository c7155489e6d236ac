from datetime import datetime

from sqlmodel import Field, SQLModel

from .timestamps import timestamp_column, utc_now


# the composite primary key is what keeps a favorite unique per user
class ListingFavorite(SQLModel, table=True):
    __tablename__ = "listing_favorites"

    user_id: int = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    listing_id: int = Field(
        foreign_key="listings.id", primary_key=True, ondelete="CASCADE"
    )
    favorited_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())


class ItemFavorite(SQLModel, table=True):
    __tablename__ = "item_favorites"

    user_id: int = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    item_id: int = Field(foreign_key="items.id", primary_key=True, ondelete="CASCADE")
    favorited_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
