"""
Inventory Auth API - Core Module
"""

from inventory_auth.core.config import settings, get_settings
from inventory_auth.core.supabase import supabase, get_supabase, SupabaseClient
from inventory_auth.core.auth import (
    get_current_user,
    get_optional_user,
    require_admin,
    session_gate,
    SessionGate,
    CurrentUser
)
from inventory_auth.core.exceptions import (
    InventoryAuthException,
    AuthenticationError,
    RateLimitedError,
    NotFoundError,
    ValidationError,
    PermissionDeniedError,
    DuplicateError,
    BackendError
)

__all__ = [
    # Config
    "settings",
    "get_settings",

    # Supabase
    "supabase",
    "get_supabase",
    "SupabaseClient",

    # Auth
    "get_current_user",
    "get_optional_user",
    "require_admin",
    "session_gate",
    "SessionGate",
    "CurrentUser",

    # Exceptions
    "InventoryAuthException",
    "AuthenticationError",
    "RateLimitedError",
    "NotFoundError",
    "ValidationError",
    "PermissionDeniedError",
    "DuplicateError",
    "BackendError",
]
