from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship

from yardloop.schemas.item_schema import ItemBase

from .timestamps import timestamp_column, utc_now

if TYPE_CHECKING:
    from .category_model import Category
    from .listing_model import Listing
    from .photo_model import ItemPhoto


class Item(ItemBase, table=True):
    __tablename__ = "items"

    id: int = Field(default=None, primary_key=True)
    listing_id: int = Field(foreign_key="listings.id", ondelete="CASCADE", index=True)
    category_id: int | None = Field(
        default=None, foreign_key="categories.id", ondelete="SET NULL"
    )
    sold: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    # Relationships
    listing: "Listing" = Relationship(back_populates="items")
    category: Optional["Category"] = Relationship()
    photos: List["ItemPhoto"] = Relationship(back_populates="item")
