"""Database models."""

from app.models.booking import Booking
from app.models.listing import Amenity, Listing, ListingAmenity, ListingPhoto
from app.models.review import Review
from app.models.user import User

__all__ = [
    # User
    "User",
    # Listing
    "Listing",
    "ListingPhoto",
    "Amenity",
    "ListingAmenity",
    # Booking
    "Booking",
    # Review
    "Review",
]
