from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Index
from sqlmodel import Field, Relationship

from yardloop.schemas.listing_schema import ListingBase

from .timestamps import timestamp_column, utc_now

if TYPE_CHECKING:
    from .category_model import Category
    from .check_in_model import CheckIn
    from .item_model import Item
    from .photo_model import ListingPhoto
    from .user_model import User


class Listing(ListingBase, table=True):
    __tablename__ = "listings"
    __table_args__ = (Index("ix_listings_location", "latitude", "longitude"),)

    id: int = Field(default=None, primary_key=True)
    seller_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    category_id: int | None = Field(
        default=None, foreign_key="categories.id", ondelete="SET NULL"
    )
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    # Relationships
    seller: "User" = Relationship()
    category: Optional["Category"] = Relationship()
    photos: List["ListingPhoto"] = Relationship(back_populates="listing")
    items: List["Item"] = Relationship(back_populates="listing")
    check_ins: List["CheckIn"] = Relationship(back_populates="listing")
