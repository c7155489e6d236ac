from fastapi import Query
from pydantic_extra_types.coordinate import Latitude, Longitude

from yardloop.services.geo.criteria import GeoPoint, SearchCriteria


def reference_point(
    lat: Latitude | None = Query(None, description="Latitude of the reference point."),
    lng: Longitude | None = Query(None, description="Longitude of the reference point."),
) -> GeoPoint | None:
    # a lone coordinate is ignored
    if lat is None or lng is None:
        return None
    return GeoPoint(float(lat), float(lng))


def listing_criteria(
    q: str | None = Query(None, description="Case insensitive text filter."),
    lat: Latitude | None = None,
    lng: Longitude | None = None,
    radius_km: float | None = Query(None, ge=0, allow_inf_nan=False),
) -> SearchCriteria:
    return SearchCriteria(query=q, latitude=lat, longitude=lng, radius_km=radius_km)


def search_criteria(
    q: str | None = Query(None, description="Case insensitive text filter."),
    category: str | None = Query(None, description="Exact category name."),
    lat: Latitude | None = None,
    lng: Longitude | None = None,
    radius_km: float | None = Query(None, ge=0, allow_inf_nan=False),
) -> SearchCriteria:
    return SearchCriteria(
        query=q, category=category, latitude=lat, longitude=lng, radius_km=radius_km
    )
