"""Row qualification: SQL pre-filters plus the exact radius predicate."""

from sqlalchemy import and_, or_

from yardloop.models.category_model import Category
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing

from .distance import BoundingBox


def listing_text_clause(query: str):
    # autoescape makes % and _ in user input match literally
    return or_(
        Listing.title.icontains(query, autoescape=True),
        Listing.description.icontains(query, autoescape=True),
        Listing.location.icontains(query, autoescape=True),
    )


def item_text_clause(query: str):
    return or_(
        Item.title.icontains(query, autoescape=True),
        Item.description.icontains(query, autoescape=True),
        Item.category.has(Category.name.icontains(query, autoescape=True)),
    )


def listing_category_clause(category: str):
    return Listing.category.has(Category.name == category)


def item_category_clause(category: str):
    return Item.category.has(Category.name == category)


def coordinates_clause(box: BoundingBox | None):
    """Listings with coordinates, narrowed to the box when there is one."""
    clauses = [Listing.latitude.is_not(None), Listing.longitude.is_not(None)]
    if box is not None:
        clauses.append(Listing.latitude.between(box.min_latitude, box.max_latitude))
        if box.min_longitude is not None:
            clauses.append(
                Listing.longitude.between(box.min_longitude, box.max_longitude)
            )
    return and_(*clauses)


def within_radius(distance_km: float | None, radius_km: float) -> bool:
    """Rows without a distance never qualify for a radius filter."""
    return distance_km is not None and distance_km <= radius_km
