"""System statistics schemas."""

from pydantic import BaseModel


class DatabaseStats(BaseModel):
    dialect: str
    pool: str
    users: int
    listings: int
    active_listings: int
    bookings: int
    reviews: int
    bookings_by_status: dict[str, int]


class RuntimeStats(BaseModel):
    python_version: str
    platform: str
    pid: int
    uptime_seconds: float
    max_rss_kb: int | None


class SystemStatsResponse(BaseModel):
    """Admin view of service health and store contents."""

    app_name: str
    version: str
    environment: str
    database: DatabaseStats
    runtime: RuntimeStats
