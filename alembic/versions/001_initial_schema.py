"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-03-02

Creates the tables for the homestay platform:
- Users
- Listings, photos and amenities
- Bookings (with the no-overlap exclusion constraint)
- Reviews
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("phone", sa.String(20)),
        sa.Column("avatar", sa.Text),
        sa.Column("date_of_birth", sa.Date),
        sa.Column("gender", sa.String(10)),
        sa.Column("bio", sa.String(500)),
        sa.Column("languages", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("address", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("preferences", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("verified", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("host_info", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("must_change_password", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )

    # ==================== AMENITIES ====================
    op.create_table(
        "amenities",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("category", sa.String(50)),
        sa.Column("icon", sa.String(50)),
    )

    # ==================== LISTINGS ====================
    op.create_table(
        "listings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=False),
        sa.Column("location", sa.String(255), nullable=False, index=True),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Numeric(10, 8)),
        sa.Column("longitude", sa.Numeric(11, 8)),
        sa.Column("max_guests", sa.Integer, nullable=False, server_default="1"),
        sa.Column("bedrooms", sa.Integer, nullable=False, server_default="1"),
        sa.Column("bathrooms", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price_per_night", sa.Integer, nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), index=True),
        sa.Column("average_rating", sa.Numeric(3, 1), nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("price_per_night >= 0", name="ck_listings_price_non_negative"),
        sa.CheckConstraint("max_guests >= 1", name="ck_listings_max_guests_positive"),
        sa.CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="ck_listings_average_rating_range"),
    )

    op.create_table(
        "listing_photos",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("alt", sa.String(255)),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "listing_amenities",
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("amenity_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id"), nullable=False, index=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("check_in", sa.Date, nullable=False),
        sa.Column("check_out", sa.Date, nullable=False),
        sa.Column("guests", sa.Integer, nullable=False, server_default="1"),
        sa.Column("total_price", sa.Integer, nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="Credit Card"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancel_reason", sa.Text),
        sa.Column("cancelled_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id")),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("check_out > check_in", name="ck_bookings_dates_ordered"),
        sa.CheckConstraint("guests >= 1", name="ck_bookings_guests_positive"),
        sa.CheckConstraint("total_price >= 0", name="ck_bookings_total_price_non_negative"),
    )
    op.create_index("ix_bookings_listing_dates", "bookings", ["listing_id", "check_in", "check_out"])

    # Pending and confirmed stays on one listing may not share a night
    op.execute(
        "ALTER TABLE bookings ADD CONSTRAINT ex_bookings_no_overlap "
        "EXCLUDE USING gist (listing_id WITH =, daterange(check_in, check_out, '[)') WITH &&) "
        "WHERE (status IN ('pending', 'confirmed'))"
    )

    # ==================== REVIEWS ====================
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id"), nullable=False, index=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.UniqueConstraint("user_id", "listing_id", name="uq_reviews_user_listing"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("listing_amenities")
    op.drop_table("listing_photos")
    op.drop_table("listings")
    op.drop_table("amenities")
    op.drop_table("users")
