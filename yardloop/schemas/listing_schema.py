from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic_extra_types.coordinate import Latitude, Longitude
from sqlmodel import Field, SQLModel

from yardloop.schemas.item_schema import ItemCreate
from yardloop.schemas.photo_schema import MAX_PHOTOS, PhotoRead, check_primary_index
from yardloop.schemas.user_schema import CheckedInUser


def check_coordinate_pair(latitude, longitude) -> None:
    if (latitude is None) != (longitude is None):
        raise ValueError("Latitude and longitude must be provided together.")


# Basic schema for listing (yard sale) data
class ListingBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    sale_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    pickup_notes: str = Field(default="", max_length=2000)
    location: str = Field(default="", max_length=255)
    latitude: Latitude | None = None
    longitude: Longitude | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value


# schema for listing creation, photos and items are written in the same transaction
class ListingCreate(ListingBase):
    category_id: int | None = None
    photos: list[str] = Field(default_factory=list, max_length=MAX_PHOTOS)
    primary_index: int = Field(default=0, ge=0)
    items: list[ItemCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_listing(self):
        check_coordinate_pair(self.latitude, self.longitude)
        check_primary_index(self.photos, self.primary_index)
        return self


# schema for partial listing update, photos replace the whole photo set
class ListingUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    sale_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    pickup_notes: str | None = Field(default=None, max_length=2000)
    location: str | None = Field(default=None, max_length=255)
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    category_id: int | None = None
    is_active: bool | None = None
    photos: list[str] | None = Field(default=None, max_length=MAX_PHOTOS)
    primary_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_listing(self):
        check_coordinate_pair(self.latitude, self.longitude)
        check_primary_index(self.photos, self.primary_index)
        return self


# Schema for listing cards and the detail page
# all stored columns plus the aggregates computed per request
class ListingRead(ListingBase):
    id: int
    seller_id: int
    category_id: int | None = None
    is_active: bool
    created_at: datetime

    seller_username: str | None = None
    seller_avatar: str | None = None
    category_name: str | None = None

    distance_km: float | None = None  # null without a reference point or coordinates
    item_count: int = 0  # unsold items only
    item_categories: list[str] = []
    photos: list[PhotoRead] = []
    checked_in_users: list[CheckedInUser] = []
    check_in_count: int = 0


class SavedListingRead(ListingRead):
    favorited_at: datetime


class NearbyCount(BaseModel):
    count: int
    latitude: float
    longitude: float
    radius_km: float
