from typing import TYPE_CHECKING

from sqlalchemy import Column, Index, LargeBinary, text
from sqlmodel import Field, Relationship

from yardloop.schemas.photo_schema import PhotoBase

if TYPE_CHECKING:
    from .item_model import Item
    from .listing_model import Listing


# at most one primary photo per owner, both dialects support partial indexes
def _single_primary_index(name: str, owner_column: str) -> Index:
    return Index(
        name,
        owner_column,
        unique=True,
        postgresql_where=text("is_primary"),
        sqlite_where=text("is_primary"),
    )


class ListingPhoto(PhotoBase, table=True):
    __tablename__ = "listing_photos"
    __table_args__ = (_single_primary_index("uq_listing_photos_primary", "listing_id"),)

    id: int = Field(default=None, primary_key=True)
    listing_id: int = Field(foreign_key="listings.id", ondelete="CASCADE", index=True)

    # binary payload is only set when no public url exists
    data: bytes | None = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    mime_type: str | None = Field(default=None, max_length=100)

    listing: "Listing" = Relationship(back_populates="photos")


class ItemPhoto(PhotoBase, table=True):
    __tablename__ = "item_photos"
    __table_args__ = (_single_primary_index("uq_item_photos_primary", "item_id"),)

    id: int = Field(default=None, primary_key=True)
    item_id: int = Field(foreign_key="items.id", ondelete="CASCADE", index=True)

    data: bytes | None = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    mime_type: str | None = Field(default=None, max_length=100)

    item: "Item" = Relationship(back_populates="photos")
