import math
from typing import NamedTuple

from .criteria import GeoPoint

EARTH_RADIUS_KM = 6371.0

# widens the SQL pre-filter box so rounding never drops a boundary row
_BOX_MARGIN_DEG = 1e-6


class BoundingBox(NamedTuple):
    min_latitude: float
    max_latitude: float
    # None when the box wraps a pole or the antimeridian
    min_longitude: float | None
    max_longitude: float | None


def great_circle_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance in kilometers using the spherical law of cosines.

    The cosine is clamped to [-1, 1]; for (nearly) identical points rounding
    would otherwise push it past 1 and acos would fail.
    """
    if lat1 == lat2 and lng1 == lng2:
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lng2) - math.radians(lng1)

    cos_angle = math.cos(phi1) * math.cos(phi2) * math.cos(delta_lambda) + math.sin(
        phi1
    ) * math.sin(phi2)
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)


def distance_from(
    origin: GeoPoint | None, latitude: float | None, longitude: float | None
) -> float | None:
    """Distance from the reference point, None when either side lacks coordinates."""
    if origin is None or latitude is None or longitude is None:
        return None
    return great_circle_km(origin.latitude, origin.longitude, latitude, longitude)


def bounding_box(origin: GeoPoint, radius_km: float) -> BoundingBox | None:
    """
    Smallest latitude/longitude box containing every point within radius_km
    of origin. Used only to narrow the rows fetched from the database, the
    exact distance check happens afterwards.

    Returns None when the radius covers the whole sphere.
    """
    angular = radius_km / EARTH_RADIUS_KM
    if angular >= math.pi:
        return None

    delta_lat = math.degrees(angular) + _BOX_MARGIN_DEG
    min_lat = origin.latitude - delta_lat
    max_lat = origin.latitude + delta_lat

    # a pole inside the circle means every longitude qualifies
    if min_lat <= -90 or max_lat >= 90:
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), None, None)

    ratio = math.sin(angular) / math.cos(math.radians(origin.latitude))
    delta_lng = math.degrees(math.asin(min(1.0, ratio))) + _BOX_MARGIN_DEG
    min_lng = origin.longitude - delta_lng
    max_lng = origin.longitude + delta_lng

    if min_lng < -180 or max_lng > 180:
        return BoundingBox(min_lat, max_lat, None, None)

    return BoundingBox(min_lat, max_lat, min_lng, max_lng)
