"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, listings, profile, reviews, system, users

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Users
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# Profile
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])

# Listings
api_router.include_router(listings.router, prefix="/listings", tags=["Listings"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Reviews
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

# System
api_router.include_router(system.router, prefix="/system", tags=["System"])
