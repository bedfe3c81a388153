"""
Inventory Auth API - Routes Module
All API endpoints organized by resource
"""

from fastapi import APIRouter

# Import all routers
from inventory_auth.routes.auth import router as auth_router
from inventory_auth.routes.users import router as users_router
from inventory_auth.routes.notifications import router as notifications_router
from inventory_auth.routes.notifications import pages_router

# Main router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(notifications_router)
api_router.include_router(pages_router)

__all__ = ["api_router"]
