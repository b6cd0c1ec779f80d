"""User-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Date, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.listing import Listing
    from app.models.review import Review


def default_preferences() -> dict[str, Any]:
    return {
        "currency": "VND",
        "language": "vi",
        "notifications": {"email": True, "sms": False, "push": True},
    }


def default_verified() -> dict[str, bool]:
    return {"email": False, "phone": False, "identity": False}


class User(Base):
    """User account model.

    ``address``, ``preferences``, ``verified`` and ``host_info`` are JSON
    documents; always assign a new dict so the change is persisted.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")  # user, host, admin

    # Profile
    phone: Mapped[str | None] = mapped_column(String(20))
    avatar: Mapped[str | None] = mapped_column(Text)
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[str | None] = mapped_column(String(10))  # male, female, other
    bio: Mapped[str | None] = mapped_column(String(500))
    languages: Mapped[list[str]] = mapped_column(JSON, default=list)

    address: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    preferences: Mapped[dict[str, Any]] = mapped_column(JSON, default=default_preferences)
    verified: Mapped[dict[str, bool]] = mapped_column(JSON, default=default_verified)
    host_info: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    must_change_password: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    listings: Mapped[list["Listing"]] = relationship(
        "Listing", back_populates="host", foreign_keys="[Listing.host_id]", lazy="raise"
    )
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="user", foreign_keys="[Booking.user_id]", lazy="raise"
    )
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="user", lazy="raise")

    @property
    def is_host(self) -> bool:
        return self.role in ("host", "admin")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
