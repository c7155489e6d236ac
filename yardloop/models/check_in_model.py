from datetime import datetime
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from .timestamps import timestamp_column, utc_now

if TYPE_CHECKING:
    from .listing_model import Listing
    from .user_model import User


# a user planning to attend a sale, count and participants are derived
class CheckIn(SQLModel, table=True):
    __tablename__ = "checkins"

    user_id: int = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    listing_id: int = Field(
        foreign_key="listings.id", primary_key=True, ondelete="CASCADE"
    )
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    user: "User" = Relationship()
    listing: "Listing" = Relationship(back_populates="check_ins")
