from datetime import date, datetime, time
from decimal import Decimal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import Field, SQLModel

from yardloop.schemas.enums import ItemCondition
from yardloop.schemas.photo_schema import MAX_PHOTOS, PhotoRead, check_primary_index


# Basic schema for item data
class ItemBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    price: Decimal = Field(max_digits=10, decimal_places=2, ge=0)
    condition: ItemCondition
    display_order: int = Field(default=0, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value


# schema for item creation, either nested in a new listing or added later
class ItemCreate(ItemBase):
    category_id: int | None = None
    photos: list[str] = Field(default_factory=list, max_length=MAX_PHOTOS)
    primary_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_primary_photo(self):
        check_primary_index(self.photos, self.primary_index)
        return self


class ItemUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2, ge=0)
    condition: ItemCondition | None = None
    category_id: int | None = None
    display_order: int | None = Field(default=None, ge=0)
    sold: bool | None = None
    photos: list[str] | None = Field(default=None, max_length=MAX_PHOTOS)
    primary_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_primary_photo(self):
        check_primary_index(self.photos, self.primary_index)
        return self


class ItemRead(ItemBase):
    id: int
    listing_id: int
    category_id: int | None = None
    sold: bool
    created_at: datetime
    category_name: str | None = None
    photos: list[PhotoRead] = []


# item row joined with the sale it belongs to
class ItemSearchResult(ItemRead):
    sale_title: str
    sale_location: str
    latitude: float | None = None
    longitude: float | None = None
    sale_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    distance_km: float | None = None


class SavedItemRead(ItemSearchResult):
    favorited_at: datetime
