from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_extra_types.coordinate import Latitude, Longitude


class GeoPoint(NamedTuple):
    latitude: float
    longitude: float


class SearchCriteria(BaseModel):
    """
    Normalised search input.

    Location filtering is active only when both coordinates are present,
    a lone latitude or longitude is ignored. The radius only applies
    while the location is active.
    """

    model_config = ConfigDict(frozen=True)

    query: str | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    radius_km: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    category: str | None = None

    @field_validator("query", "category", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def origin(self) -> GeoPoint | None:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(float(self.latitude), float(self.longitude))

    @property
    def location_active(self) -> bool:
        return self.origin is not None

    @property
    def radius_active(self) -> bool:
        return self.location_active and self.radius_km is not None
