"""
Inventory Auth API - Services Module
Business logic layer over the Supabase backend
"""

from inventory_auth.services.auth_service import auth_service, AuthService
from inventory_auth.services.users_service import users_service, UsersService
from inventory_auth.services.profile_service import profile_service, ProfileService
from inventory_auth.services.notifications_service import notifications_service, NotificationsService

__all__ = [
    "auth_service",
    "users_service",
    "profile_service",
    "notifications_service",
    "AuthService",
    "UsersService",
    "ProfileService",
    "NotificationsService",
]
