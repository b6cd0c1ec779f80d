"""
API tests for health and system statistics.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from helpers import auth_headers, soon


@pytest.mark.integration
async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Request-ID" in response.headers


@pytest.mark.integration
async def test_system_stats(client, admin, guest, listing, make_booking) -> None:
    await make_booking(listing, guest, soon(10), soon(12), status="confirmed")
    await make_booking(listing, guest, soon(20), soon(22), status="cancelled")

    response = await client.get("/api/v1/system/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["database"]["dialect"] == "sqlite"
    assert body["database"]["users"] == 3
    assert body["database"]["active_listings"] == 1
    assert body["database"]["bookings_by_status"] == {"confirmed": 1, "cancelled": 1}
    assert body["runtime"]["pid"] > 0


@pytest.mark.integration
async def test_system_stats_admin_only(client, guest) -> None:
    response = await client.get("/api/v1/system/stats", headers=auth_headers(guest))
    assert response.status_code == 403


@pytest.mark.integration
async def test_store_outage_is_503(client) -> None:
    with patch(
        "app.api.v1.listings.listing_service.list_amenities",
        side_effect=OperationalError("SELECT", {}, Exception("connection refused")),
    ):
        response = await client.get("/api/v1/listings/amenities/all")

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "5"
    assert response.json()["code"] == "store_unavailable"


@pytest.mark.integration
async def test_pool_timeout_is_503(client) -> None:
    with patch(
        "app.api.v1.listings.listing_service.list_amenities",
        side_effect=PoolTimeoutError("QueuePool limit reached"),
    ):
        response = await client.get("/api/v1/listings/amenities/all")

    assert response.status_code == 503
    assert response.json()["code"] == "store_unavailable"


@pytest.mark.integration
async def test_refused_connection_is_503(client) -> None:
    with patch(
        "app.api.v1.listings.listing_service.list_amenities",
        side_effect=ConnectionRefusedError(111, "Connect call failed"),
    ):
        response = await client.get("/api/v1/listings/amenities/all")

    assert response.status_code == 503
    assert response.json()["code"] == "store_unavailable"
