from app.models.admin import Admin
from app.models.listing import Listing, ListingStatus

__all__ = [
    "Admin",
    "Listing",
    "ListingStatus",
]
