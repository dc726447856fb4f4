"""
Routes package - organized API routes.

This package provides modular route definitions.
Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .auth_routes import router as auth_router
from .gym_routes import router as gym_router
from .member_routes import router as member_router
from .attendance_routes import router as attendance_router
from .payment_routes import router as payment_router
from .communication_routes import router as communication_router
from .analytics_routes import router as analytics_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(auth_router, tags=["auth"])
combined_router.include_router(gym_router, tags=["gyms"])
combined_router.include_router(member_router, tags=["members"])
combined_router.include_router(attendance_router, tags=["attendance"])
combined_router.include_router(payment_router, tags=["payments"])
combined_router.include_router(communication_router, tags=["communications"])
combined_router.include_router(analytics_router, tags=["analytics"])

__all__ = [
    'combined_router', 'auth_router', 'gym_router', 'member_router', 'attendance_router',
    'payment_router', 'communication_router', 'analytics_router'
]
