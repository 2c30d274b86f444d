"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, bookings, cycle, splits, waitlist

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    auth.router, prefix="/auth", tags=["Authentication"]
)
api_router.include_router(
    cycle.router, prefix="/cycle", tags=["Cycle"]
)
api_router.include_router(
    splits.router, prefix="/splits", tags=["Split plans"]
)
api_router.include_router(
    bookings.router, prefix="/bookings", tags=["Bookings"]
)
api_router.include_router(
    waitlist.router, prefix="/waitlist", tags=["Waitlist"]
)
