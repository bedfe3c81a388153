"""
Inventory Auth API - Schemas Module
Pydantic models for request/response validation
"""

from inventory_auth.schemas.common import (
    UserRole,
    BaseResponse,
    ErrorResponse,
)

from inventory_auth.schemas.auth import (
    LoginRequest,
    LoginResponse,
    UserProfile,
    UpdateProfileRequest,
    BootstrapRequest,
    SessionStatus,
)

from inventory_auth.schemas.users import (
    UserCreate,
    UserListResponse,
    UsernameAvailability,
)

from inventory_auth.schemas.notifications import (
    NotificationCount,
    NotificationCountsResponse,
    NewItemIdsResponse,
    PageVisitResponse,
)

__all__ = [
    # Common
    "UserRole",
    "BaseResponse",
    "ErrorResponse",

    # Auth
    "LoginRequest",
    "LoginResponse",
    "UserProfile",
    "UpdateProfileRequest",
    "BootstrapRequest",
    "SessionStatus",

    # Users
    "UserCreate",
    "UserListResponse",
    "UsernameAvailability",

    # Notifications
    "NotificationCount",
    "NotificationCountsResponse",
    "NewItemIdsResponse",
    "PageVisitResponse",
]
