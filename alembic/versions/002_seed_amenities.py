"""Seed amenities data.

Revision ID: 002_seed_amenities
Revises: 001_initial
Create Date: 2025-03-02

Seeds the amenities table with the catalogue hosts pick from.
"""

import uuid
from typing import Sequence

from alembic import op
from sqlalchemy import String, column, table
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers
revision: str = "002_seed_amenities"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Amenities data organized by category
AMENITIES = [
    # ===== ESSENTIALS =====
    {"name": "Wifi", "category": "essentials", "icon": "wifi"},
    {"name": "Điều hòa", "category": "essentials", "icon": "air"},
    {"name": "Tivi", "category": "essentials", "icon": "tv"},
    {"name": "Bếp", "category": "essentials", "icon": "kitchen"},
    {"name": "Máy giặt", "category": "essentials", "icon": "local_laundry_service"},

    # ===== FEATURES =====
    {"name": "Bãi đậu xe", "category": "features", "icon": "local_parking"},
    {"name": "Thang máy", "category": "features", "icon": "elevator"},
    {"name": "Lò sưởi", "category": "features", "icon": "fireplace"},

    # ===== OUTDOOR =====
    {"name": "Bể bơi", "category": "outdoor", "icon": "pool"},
    {"name": "Sân vườn", "category": "outdoor", "icon": "yard"},
    {"name": "Ban công", "category": "outdoor", "icon": "balcony"},
    {"name": "BBQ", "category": "outdoor", "icon": "outdoor_grill"},

    # ===== WELLNESS =====
    {"name": "Phòng gym", "category": "wellness", "icon": "fitness_center"},
    {"name": "Jacuzzi", "category": "wellness", "icon": "hot_tub"},
    {"name": "Sauna", "category": "wellness", "icon": "spa"},
]


def upgrade() -> None:
    """Insert seed amenities."""
    amenities_table = table(
        "amenities",
        column("id", UUID(as_uuid=True)),
        column("name", String),
        column("category", String),
        column("icon", String),
    )

    op.bulk_insert(
        amenities_table,
        [{"id": uuid.uuid4(), **a} for a in AMENITIES],
    )


def downgrade() -> None:
    """Remove seed amenities."""
    amenity_names = [a["name"] for a in AMENITIES]
    amenities_table = table("amenities", column("name", String))

    op.execute(
        amenities_table.delete().where(amenities_table.c.name.in_(amenity_names))
    )
