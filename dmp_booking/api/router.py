from __future__ import annotations

from fastapi import APIRouter

from dmp_booking.api.routes import auth, bookings, dmp, health, requests, suppliers, users, zones

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/user", tags=["user"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
api_router.include_router(zones.router, prefix="/zones", tags=["zones"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(health.router, tags=["health"])

# DMP manager
api_router.include_router(dmp.router, prefix="/dmp", tags=["dmp"])
