"""
Top‑level router for version 1 of the API.

When new endpoint modules are added, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import registrations, revenue

router = APIRouter()

router.include_router(registrations.router, prefix="/registrations", tags=["registrations"])
router.include_router(revenue.router, prefix="/revenue", tags=["revenue"])
