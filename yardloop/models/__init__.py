from .category_model import Category
from .check_in_model import CheckIn
from .conversation_model import Conversation, Message
from .favorite_model import ItemFavorite, ListingFavorite
from .item_model import Item
from .listing_model import Listing
from .photo_model import ItemPhoto, ListingPhoto
from .user_model import User

__all__ = [
    "Category",
    "CheckIn",
    "Conversation",
    "Item",
    "ItemFavorite",
    "ItemPhoto",
    "Listing",
    "ListingFavorite",
    "ListingPhoto",
    "Message",
    "User",
]
