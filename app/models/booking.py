"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.listing import Listing
    from app.models.user import User


BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")

# Statuses that hold dates on the calendar
OCCUPYING_STATUSES = ("pending", "confirmed")

PAYMENT_METHODS = ("Credit Card", "Bank Transfer", "Cash", "E-Wallet")

NO_OVERLAP_CONSTRAINT = "ex_bookings_no_overlap"


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_out > check_in", name="ck_bookings_dates_ordered"),
        CheckConstraint("guests >= 1", name="ck_bookings_guests_positive"),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price_non_negative"),
        Index("ix_bookings_listing_dates", "listing_id", "check_in", "check_out"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )

    # Dates (half-open: check_out night is not occupied)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)

    guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False, default="Credit Card")

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, confirmed, cancelled, completed

    # Cancellation
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancel_reason: Mapped[str | None] = mapped_column(Text)
    cancelled_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))

    # Timestamps
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing", back_populates="bookings", lazy="raise")
    user: Mapped["User"] = relationship(
        "User", back_populates="bookings", foreign_keys=[user_id], lazy="raise"
    )

    @property
    def nights(self) -> int:
        """Calculate number of nights."""
        return (self.check_out - self.check_in).days

    @property
    def is_occupying(self) -> bool:
        return self.status in OCCUPYING_STATUSES


# Database-level guarantee against overlapping occupying bookings (PostgreSQL only).
event.listen(
    Booking.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE bookings ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist (listing_id WITH =, daterange(check_in, check_out, '[)') WITH &&) "
        "WHERE (status IN ('pending', 'confirmed'))"
    ).execute_if(dialect="postgresql"),
)
