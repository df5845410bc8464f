"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import addresses, auth, registration, users

router = APIRouter()

router.include_router(auth.router)
router.include_router(registration.router)
router.include_router(users.router)
router.include_router(addresses.router)
