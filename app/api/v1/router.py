"""
API v1 router setup
Organized into: bookings (customer and business JWT) and dashboard (business JWT)
"""
from fastapi import APIRouter

from app.api.v1 import bookings
from app.api.v1.dashboard import business, schedule

api_v1_router = APIRouter()

# ============================================================================
# BOOKING ROUTES (availability is public, the rest require a JWT)
# ============================================================================
api_v1_router.include_router(
    bookings.router,
    # No prefix needed - bookings.router already has "/bookings" prefix
    tags=["Bookings"]
)

# ============================================================================
# DASHBOARD ROUTES (business JWT required)
# ============================================================================
api_v1_router.include_router(
    schedule.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    business.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "availability": "No authentication required",
            "bookings": "JWT Bearer token with role 'user' or 'business'",
            "dashboard": "JWT Bearer token with role 'business'"
        }
    }
