"""Nested result shapes built from loaded rows and their children."""

from typing import Iterable

from yardloop.models.check_in_model import CheckIn
from yardloop.models.item_model import Item
from yardloop.models.listing_model import Listing
from yardloop.models.photo_model import ItemPhoto, ListingPhoto
from yardloop.schemas.item_schema import ItemRead, ItemSearchResult
from yardloop.schemas.listing_schema import ListingRead
from yardloop.schemas.photo_schema import PhotoRead
from yardloop.schemas.user_schema import CheckedInUser


def listing_photo_path(listing_id: int, photo_id: int) -> str:
    return f"/api/listings/{listing_id}/photos/{photo_id}"


def item_photo_path(item_id: int, photo_id: int) -> str:
    return f"/api/items/{item_id}/photos/{photo_id}"


def ordered_photos(photos: Iterable[ListingPhoto | ItemPhoto]) -> list:
    """Primary photo first, then by position, id breaks ties."""
    return sorted(photos, key=lambda p: (not p.is_primary, p.position, p.id))


def project_listing_photos(listing: Listing) -> list[PhotoRead]:
    return [
        PhotoRead(
            id=photo.id,
            url=photo.url or listing_photo_path(listing.id, photo.id),
            is_primary=photo.is_primary,
            position=photo.position,
        )
        for photo in ordered_photos(listing.photos)
    ]


def project_item_photos(item: Item) -> list[PhotoRead]:
    return [
        PhotoRead(
            id=photo.id,
            url=photo.url or item_photo_path(item.id, photo.id),
            is_primary=photo.is_primary,
            position=photo.position,
        )
        for photo in ordered_photos(item.photos)
    ]


def unsold_items(items: Iterable[Item]) -> list[Item]:
    return [item for item in items if not item.sold]


def item_categories(items: Iterable[Item]) -> list[str]:
    """Distinct category names of the unsold items, alphabetical."""
    names = {
        item.category.name for item in unsold_items(items) if item.category is not None
    }
    return sorted(names)


def checked_in_users(check_ins: Iterable[CheckIn]) -> list[CheckedInUser]:
    users = [
        CheckedInUser(
            id=check_in.user.id,
            username=check_in.user.username,
            avatarurl=check_in.user.avatarurl,
        )
        for check_in in check_ins
        if check_in.user is not None
    ]
    return sorted(users, key=lambda u: u.id)


def project_listing(listing: Listing, distance_km: float | None = None) -> ListingRead:
    """
    Listing columns plus the per-request aggregates. Expects seller,
    category, photos, items (with category) and check_ins (with user) loaded.
    """
    attendees = checked_in_users(listing.check_ins)
    return ListingRead(
        **listing.model_dump(),
        seller_username=listing.seller.username if listing.seller else None,
        seller_avatar=listing.seller.avatarurl if listing.seller else None,
        category_name=listing.category.name if listing.category else None,
        distance_km=distance_km,
        item_count=len(unsold_items(listing.items)),
        item_categories=item_categories(listing.items),
        photos=project_listing_photos(listing),
        checked_in_users=attendees,
        check_in_count=len(attendees),
    )


def project_item(item: Item) -> ItemRead:
    """Item columns with category name and photos, category and photos loaded."""
    return ItemRead(
        **item.model_dump(),
        category_name=item.category.name if item.category else None,
        photos=project_item_photos(item),
    )


def project_item_with_sale(
    item: Item, distance_km: float | None = None
) -> ItemSearchResult:
    """Item joined with its sale, additionally expects the listing loaded."""
    sale = item.listing
    return ItemSearchResult(
        **item.model_dump(),
        category_name=item.category.name if item.category else None,
        photos=project_item_photos(item),
        sale_title=sale.title,
        sale_location=sale.location,
        latitude=sale.latitude,
        longitude=sale.longitude,
        sale_date=sale.sale_date,
        start_time=sale.start_time,
        end_time=sale.end_time,
        distance_km=distance_km,
    )
