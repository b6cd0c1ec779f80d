"""Listing-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.review import Review
    from app.models.user import User


class Listing(Base):
    """Homestay listing model.

    ``average_rating`` and ``total_reviews`` are a projection of the listing's
    reviews and are written only by the rating service.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("price_per_night >= 0", name="ck_listings_price_non_negative"),
        CheckConstraint("max_guests >= 1", name="ck_listings_max_guests_positive"),
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5", name="ck_listings_average_rating_range"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    host_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Basic Info
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)

    # Location
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 8))
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(11, 8))

    # Capacity
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Pricing (whole currency units)
    price_per_night: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Aggregates
    average_rating: Mapped[Decimal] = mapped_column(Numeric(3, 1), nullable=False, default=Decimal("0"))
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    host: Mapped["User"] = relationship(
        "User", back_populates="listings", foreign_keys=[host_id], lazy="raise"
    )
    photos: Mapped[list["ListingPhoto"]] = relationship(
        "ListingPhoto",
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="ListingPhoto.sort_order",
        lazy="selectin",
    )
    amenities: Mapped[list["ListingAmenity"]] = relationship(
        "ListingAmenity", back_populates="listing", cascade="all, delete-orphan", lazy="selectin"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="listing", lazy="raise")
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="listing", lazy="raise")

    @property
    def amenity_names(self) -> list[str]:
        """Names of attached amenities."""
        return [link.amenity.name for link in self.amenities]

    @property
    def cover_photo_url(self) -> str | None:
        """Get cover photo URL."""
        return self.photos[0].url if self.photos else None


class ListingPhoto(Base):
    """Listing photo model."""

    __tablename__ = "listing_photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    alt: Mapped[str | None] = mapped_column(String(255))
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing", back_populates="photos")


class Amenity(Base):
    """Amenity reference table."""

    __tablename__ = "amenities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50))  # essentials, features, outdoor, wellness
    icon: Mapped[str | None] = mapped_column(String(50))


class ListingAmenity(Base):
    """Many-to-many relationship between listings and amenities."""

    __tablename__ = "listing_amenities"

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("listings.id", ondelete="CASCADE"),
        primary_key=True,
    )
    amenity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("amenities.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing", back_populates="amenities")
    amenity: Mapped["Amenity"] = relationship("Amenity", lazy="selectin")
