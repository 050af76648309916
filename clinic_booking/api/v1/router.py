"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from clinic_booking.api.v1 import auth, bookings, health, slots
from clinic_booking.schemas.common import ErrorResponse

# Documented failure envelope for routers that raise domain errors
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

api_router = APIRouter()

# Health check
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

# Authentication
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"],
    responses=ERROR_RESPONSES,
)

# Slot inventory
api_router.include_router(
    slots.router,
    prefix="/slots",
    tags=["slots"],
    responses=ERROR_RESPONSES,
)

# Bookings
api_router.include_router(
    bookings.router,
    tags=["bookings"],
    responses=ERROR_RESPONSES,
)
