from .criteria import GeoPoint, SearchCriteria
from .distance import EARTH_RADIUS_KM, bounding_box, distance_from, great_circle_km
from .engine import GeoQueryEngine

__all__ = [
    "EARTH_RADIUS_KM",
    "GeoPoint",
    "GeoQueryEngine",
    "SearchCriteria",
    "bounding_box",
    "distance_from",
    "great_circle_km",
]
